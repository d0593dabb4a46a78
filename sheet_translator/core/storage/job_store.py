"""
Job Store - Persists job status and progress in the relational ``jobs`` table.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..errors import JobNotFoundError
from ..schemas.job import JobRecord, JobStatus

logger = logging.getLogger(__name__)

Base = declarative_base()

_UPDATABLE_FIELDS = {"status", "progress", "processed_file_url"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobRow(Base):
    __tablename__ = "jobs"

    job_id = Column(String, primary_key=True)
    status = Column(String, nullable=False, default=JobStatus.QUEUED.value)
    progress = Column(Integer, nullable=False, default=0)
    processed_file_url = Column(Text, nullable=True)
    custom_comments = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)


def create_db_engine(database_url: str) -> Engine:
    """
    Build an engine for ``database_url``.

    In-memory SQLite shares one connection across threads so that the
    executor threads the pipeline runs on all see the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def init_schema(engine: Engine) -> None:
    """Create the jobs table if it does not exist. Idempotent."""
    Base.metadata.create_all(engine)


class JobStore:
    """Reads and updates rows of the ``jobs`` table."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def create(self, job_id: str, custom_comments: Optional[str] = None) -> JobRecord:
        """Insert a queued job. Jobs are normally created by the client app."""
        with self.SessionLocal() as db:
            row = JobRow(job_id=job_id, custom_comments=custom_comments,
                         status=JobStatus.QUEUED.value, progress=0)
            db.add(row)
            db.commit()
            db.refresh(row)
            return JobRecord.model_validate(row)

    def get(self, job_id: str) -> JobRecord:
        """
        Load a job.

        Raises:
            JobNotFoundError: no row for ``job_id``
        """
        with self.SessionLocal() as db:
            row = db.get(JobRow, job_id)
            if row is None:
                raise JobNotFoundError(job_id)
            return JobRecord.model_validate(row)

    def update(self, job_id: str, **fields: Any) -> None:
        """
        Overwrite the given fields and stamp ``updated_at``.

        Updates for unknown job ids are a no-op, matching a keyed UPDATE.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update job fields: {sorted(unknown)}")

        values = dict(fields)
        if isinstance(values.get("status"), JobStatus):
            values["status"] = values["status"].value
        values["updated_at"] = _utcnow()

        with self.SessionLocal() as db:
            updated = db.query(JobRow).filter(JobRow.job_id == job_id).update(values)
            db.commit()

        if not updated:
            logger.warning(f"Job {job_id} not found while updating {sorted(fields)}")
