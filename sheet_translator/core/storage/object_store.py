"""
Object Store - Google Cloud Storage access for input and output workbooks.
"""

import logging
from datetime import timedelta
from typing import Optional
from urllib.parse import unquote, urlsplit

from google.cloud import storage

logger = logging.getLogger(__name__)


def object_name_from_url(file_url: str) -> str:
    """
    Derive the object name from the last path segment of a file reference.

    Works for bare names, gs:// URIs and https URLs; query strings and
    fragments are ignored.
    """
    path = urlsplit(file_url).path or file_url
    return unquote(path.rsplit("/", 1)[-1])


class ObjectStore:
    """Reads and writes objects in a single bucket."""

    def __init__(self, bucket_name: str, client: Optional[storage.Client] = None):
        self.bucket_name = bucket_name
        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)

    def download(self, name: str) -> bytes:
        data = self.bucket.blob(name).download_as_bytes()
        logger.info(f"Downloaded {name} ({len(data)} bytes) from {self.bucket_name}")
        return data

    def upload(self, name: str, data: bytes, content_type: str) -> None:
        self.bucket.blob(name).upload_from_string(data, content_type=content_type)
        logger.info(f"Uploaded {name} to {self.bucket_name}")

    def signed_read_url(self, name: str, ttl: timedelta) -> str:
        """V4 signed GET URL for ``name`` that expires after ``ttl``."""
        return self.bucket.blob(name).generate_signed_url(
            version="v4",
            expiration=ttl,
            method="GET"
        )
