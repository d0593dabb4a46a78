from .job import (
    JobStatus,
    JobRecord,
    ProcessFileRequest,
    ProcessFileResponse,
    TranslatableRow,
)

__all__ = [
    'JobStatus',
    'JobRecord',
    'ProcessFileRequest',
    'ProcessFileResponse',
    'TranslatableRow'
]
