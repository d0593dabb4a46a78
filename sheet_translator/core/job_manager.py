"""
Job Manager - Main orchestrator for the spreadsheet translation pipeline.
Manages job lifecycle from the processing mark to the terminal status.
"""

import asyncio
import logging
from datetime import timedelta
from functools import partial
from typing import Any, Callable, Optional, Set, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from .errors import MissingDataRangeError
from .extractors import ColumnResolver, RowExtractor, has_data_range
from .reconstruction import WorkbookWriter, XLSX_CONTENT_TYPE, read_workbook
from .schemas.job import JobStatus
from .storage import JobStore, ObjectStore, object_name_from_url
from .translation import BatchTranslator

logger = logging.getLogger(__name__)

T = TypeVar("T")

PROCESSED_PREFIX = "processed-"
SIGNED_URL_TTL = timedelta(minutes=10)


class JobManager:
    """
    Main orchestrator for the translation pipeline.

    Collaborators are built once by the caller and shared by every job;
    per-job state (workbook, rows, cache) lives only inside a single run.
    """

    def __init__(self, object_store: ObjectStore, job_store: JobStore,
                 translator: BatchTranslator,
                 column_resolver: Optional[ColumnResolver] = None,
                 row_extractor: Optional[RowExtractor] = None,
                 workbook_writer: Optional[WorkbookWriter] = None):
        self.object_store = object_store
        self.job_store = job_store
        self.translator = translator
        self.column_resolver = column_resolver or ColumnResolver()
        self.row_extractor = row_extractor or RowExtractor()
        self.workbook_writer = workbook_writer or WorkbookWriter()

        self._tasks: Set[asyncio.Task] = set()

    async def submit_job(self, file_url: str, job_id: str) -> asyncio.Task:
        """
        Mark the job as processing and start the pipeline in the background.

        Args:
            file_url: Reference to the uploaded workbook
            job_id: Job identifier in the job store

        Returns:
            The background task; callers are not expected to await it

        Raises:
            Any error from the job store while marking the job; no task is
            started in that case
        """
        logger.info(f"Starting processing for jobId: {job_id} with file: {file_url}")
        await self._run_sync(self.job_store.update, job_id, status=JobStatus.PROCESSING)

        task = asyncio.create_task(self.run_job(file_url, job_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run_job(self, file_url: str, job_id: str) -> Optional[str]:
        """
        Run the pipeline and record the terminal status.

        Returns:
            Signed URL of the processed file, or None if the job failed
        """
        try:
            processed_file_url = await self.process_file(file_url, job_id)
        except Exception:
            logger.exception(f"Error processing job {job_id}")
            await self._mark(job_id, status=JobStatus.ERROR)
            return None

        logger.info(f"Processing complete for job {job_id}: {processed_file_url}")
        await self._mark(
            job_id,
            status=JobStatus.COMPLETED,
            processed_file_url=processed_file_url,
            progress=100
        )
        return processed_file_url

    async def process_file(self, file_url: str, job_id: str) -> str:
        """
        Main pipeline: download, translate, write back, upload.

        Args:
            file_url: Reference whose last path segment names the object
            job_id: Job identifier used for comments and progress

        Returns:
            Signed read URL of the processed workbook
        """
        file_name = object_name_from_url(file_url)

        job = await self._run_sync(self.job_store.get, job_id)
        custom_comments = job.custom_comments or None

        data = await self._run_sync(self.object_store.download, file_name)
        workbook = await self._run_sync(read_workbook, data)
        logger.info(f"Workbook read. Sheets: {', '.join(workbook.sheetnames)}")

        sheet = workbook.worksheets[0]
        if not has_data_range(sheet):
            raise MissingDataRangeError(f"Sheet '{sheet.title}' of {file_name} has no data range")

        layout = self.column_resolver.resolve_sheet(sheet)
        extraction = self.row_extractor.extract(sheet, layout.source, layout.target)

        cache = await self.translator.translate(
            extraction.unique_strings,
            custom_comments=custom_comments,
            on_progress=partial(self._report_progress, job_id)
        )

        await self._run_sync(self.workbook_writer.apply_translations, sheet, extraction.rows, cache)
        out_data = await self._run_sync(self.workbook_writer.serialize, workbook)

        processed_name = f"{PROCESSED_PREFIX}{file_name}"
        await self._run_sync(self.object_store.upload, processed_name, out_data, XLSX_CONTENT_TYPE)
        logger.info(f"Processed file uploaded as {processed_name}")

        return await self._run_sync(self.object_store.signed_read_url, processed_name, SIGNED_URL_TTL)

    async def wait_for_jobs(self):
        """Wait for every job started by this manager to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _report_progress(self, job_id: str, progress: int):
        await self._mark(job_id, progress=progress)

    async def _mark(self, job_id: str, **fields: Any):
        # Status writes are best effort once the job is running.
        try:
            await self._run_sync(self.job_store.update, job_id, **fields)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update job {job_id} with {sorted(fields)}: {e}")

    async def _run_sync(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))
