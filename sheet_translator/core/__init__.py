"""
Core Spreadsheet Translation Pipeline Components.
"""

from .job_manager import JobManager
from .schemas.job import JobStatus, JobRecord, TranslatableRow

__all__ = [
    'JobManager',
    'JobStatus',
    'JobRecord',
    'TranslatableRow'
]
