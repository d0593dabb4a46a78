"""
FastAPI Service - Spreadsheet Translation API
Accepts processing requests and runs the translation pipeline in the background.
"""

import logging
import secrets
from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, Depends, Header, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..config import Settings, get_settings
from ..core import JobManager
from ..core.schemas.job import ProcessFileRequest, ProcessFileResponse
from ..core.storage import JobStore, ObjectStore, create_db_engine, init_schema
from ..core.translation import BatchTranslator, GeminiClient

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="Spreadsheet Translation API",
    description="Translates spreadsheet columns to Norwegian in the background",
    version=VERSION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthCheck(BaseModel):
    """Health check response"""
    status: str
    version: str
    services: Dict[str, bool]
    timestamp: datetime


@lru_cache()
def get_job_manager() -> JobManager:
    """Build the process-wide pipeline and its collaborators once."""
    settings = get_settings()

    engine = create_db_engine(settings.database_url)
    init_schema(engine)

    client = GeminiClient(
        api_key=settings.openrouter_api_key or "",
        base_url=settings.gemini_base_url,
        model=settings.gemini_model,
        timeout=settings.gemini_timeout,
        requests_per_minute=settings.requests_per_minute
    )
    return JobManager(
        object_store=ObjectStore(settings.gcloud_bucket),
        job_store=JobStore(engine),
        translator=BatchTranslator(client)
    )


def authenticate(x_api_key: Optional[str] = Header(default=None),
                 settings: Settings = Depends(get_settings)):
    """Require the shared secret in the ``x-api-key`` header."""
    if not x_api_key or not secrets.compare_digest(x_api_key.encode(), settings.api_key.encode()):
        logger.error("Unauthorized access attempt")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


# API Endpoints

@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint"""
    return {
        "service": "Spreadsheet Translation Pipeline",
        "version": VERSION,
        "status": "operational"
    }


@app.get("/health", response_model=HealthCheck)
async def health_check(job_manager: JobManager = Depends(get_job_manager)):
    """Health check endpoint"""
    services = {
        "api": True,
        "translation_model": await job_manager.translator.client.health_check()
    }

    return HealthCheck(
        status="healthy" if all(services.values()) else "degraded",
        version=VERSION,
        services=services,
        timestamp=datetime.now(timezone.utc)
    )


@app.post("/process-file", response_model=ProcessFileResponse,
          response_model_by_alias=True, dependencies=[Depends(authenticate)])
async def process_file(request: ProcessFileRequest,
                       job_manager: JobManager = Depends(get_job_manager)):
    """
    Start translating a spreadsheet.

    - **fileUrl**: Reference to the uploaded workbook; its last path segment
      is the object name in the bucket
    - **jobId**: Job identifier in the jobs table

    Responds as soon as the job is marked as processing. Progress and the
    download link are published through the jobs table.
    """
    logger.info("Received request to process file")

    if not request.file_url or not request.job_id:
        logger.error(f"Invalid request body: {request.model_dump(by_alias=True)}")
        raise HTTPException(status_code=400, detail="Missing fileUrl or jobId")

    try:
        await job_manager.submit_job(request.file_url, request.job_id)
    except Exception as e:
        logger.exception(f"Unexpected error in processing: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return ProcessFileResponse(message="Processing initiated", job_id=request.job_id)


# Exception handlers

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    logger.error(f"Invalid request body: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "Missing fileUrl or jobId"}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )


# Startup and shutdown events

@app.on_event("startup")
async def startup_event():
    """Configure logging on startup"""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logger.info("Spreadsheet Translation API starting...")


@app.on_event("shutdown")
async def shutdown_event():
    """Let running jobs finish before the process exits"""
    logger.info("Spreadsheet Translation API shutting down...")
    if get_job_manager.cache_info().currsize:
        await get_job_manager().wait_for_jobs()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
