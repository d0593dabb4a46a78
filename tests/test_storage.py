from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from sheet_translator.core.errors import JobNotFoundError
from sheet_translator.core.schemas.job import JobStatus
from sheet_translator.core.storage import ObjectStore, object_name_from_url


class TestObjectNameFromUrl:

    @pytest.mark.parametrize("file_url, expected", [
        ("report.xlsx", "report.xlsx"),
        ("https://storage.googleapis.com/bucket/uploads/report.xlsx", "report.xlsx"),
        ("https://storage.googleapis.com/bucket/report.xlsx?X-Goog-Signature=abc", "report.xlsx"),
        ("gs://bucket/my%20file.xlsx", "my file.xlsx"),
    ])
    def test_last_path_segment(self, file_url, expected):
        assert object_name_from_url(file_url) == expected


class TestObjectStore:

    def make_store(self):
        client = MagicMock()
        bucket = client.bucket.return_value
        return ObjectStore("uploads", client=client), client, bucket

    def test_uses_configured_bucket(self):
        _, client, _ = self.make_store()
        client.bucket.assert_called_once_with("uploads")

    def test_download(self):
        store, _, bucket = self.make_store()
        bucket.blob.return_value.download_as_bytes.return_value = b"xlsx"

        assert store.download("in.xlsx") == b"xlsx"
        bucket.blob.assert_called_with("in.xlsx")

    def test_upload_sets_content_type(self):
        store, _, bucket = self.make_store()
        store.upload("processed-in.xlsx", b"data", "application/test")

        bucket.blob.assert_called_with("processed-in.xlsx")
        bucket.blob.return_value.upload_from_string.assert_called_once_with(
            b"data", content_type="application/test"
        )

    def test_signed_read_url(self):
        store, _, bucket = self.make_store()
        bucket.blob.return_value.generate_signed_url.return_value = "https://signed"

        url = store.signed_read_url("processed-in.xlsx", timedelta(minutes=10))

        assert url == "https://signed"
        bucket.blob.return_value.generate_signed_url.assert_called_once_with(
            version="v4", expiration=timedelta(minutes=10), method="GET"
        )


class TestJobStore:

    def test_get_returns_custom_comments(self, job_store):
        job_store.create("job-1", custom_comments="Formal tone")
        job = job_store.get("job-1")

        assert job.job_id == "job-1"
        assert job.status == JobStatus.QUEUED
        assert job.progress == 0
        assert job.custom_comments == "Formal tone"
        assert job.created_at is not None

    def test_get_unknown_job_raises(self, job_store):
        with pytest.raises(JobNotFoundError):
            job_store.get("missing")

    def test_update_overwrites_fields_and_stamps_updated_at(self, job_store):
        job_store.create("job-1")
        job_store.update("job-1", status=JobStatus.PROCESSING)
        job_store.update("job-1", progress=40)
        job_store.update("job-1", progress=40)

        job = job_store.get("job-1")
        assert job.status == JobStatus.PROCESSING
        assert job.progress == 40
        assert job.updated_at is not None

    def test_update_unknown_job_is_a_noop(self, job_store):
        job_store.update("missing", status=JobStatus.ERROR)
        with pytest.raises(JobNotFoundError):
            job_store.get("missing")

    def test_update_rejects_read_only_fields(self, job_store):
        job_store.create("job-1")
        with pytest.raises(ValueError):
            job_store.update("job-1", custom_comments="changed")
