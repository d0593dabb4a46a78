from enum import Enum
from typing import Optional
from datetime import datetime
from dataclasses import dataclass
from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class ProcessFileRequest(BaseModel):
    """Body of the trigger endpoint. Both fields are checked by the route."""
    file_url: Optional[str] = Field(default=None, alias="fileUrl")
    job_id: Optional[str] = Field(default=None, alias="jobId")

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class ProcessFileResponse(BaseModel):
    message: str
    job_id: str = Field(..., serialization_alias="jobId")


class JobRecord(BaseModel):
    job_id: str
    status: JobStatus = JobStatus.QUEUED
    progress: int = Field(default=0, ge=0, le=100)
    processed_file_url: Optional[str] = None
    custom_comments: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


@dataclass(frozen=True)
class TranslatableRow:
    """A source cell that needs a translation written next to it."""
    row: int
    original: str
    target_column: int
