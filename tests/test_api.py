from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from sheet_translator.api.main import app, get_job_manager
from sheet_translator.core import JobManager

HEADERS = {"x-api-key": "test-key"}
BODY = {"fileUrl": "https://storage.googleapis.com/test-bucket/strings.xlsx", "jobId": "job-1"}


@pytest.fixture
def job_manager():
    manager = MagicMock()
    manager.submit_job = AsyncMock()
    app.dependency_overrides[get_job_manager] = lambda: manager
    yield manager
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


class TestProcessFile:

    def test_starts_job_and_acknowledges(self, client, job_manager):
        response = client.post("/process-file", json=BODY, headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {"message": "Processing initiated", "jobId": "job-1"}
        job_manager.submit_job.assert_awaited_once_with(BODY["fileUrl"], "job-1")

    def test_missing_job_id_is_rejected(self, client, job_manager):
        response = client.post("/process-file", json={"fileUrl": BODY["fileUrl"]}, headers=HEADERS)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing fileUrl or jobId"}
        job_manager.submit_job.assert_not_called()

    def test_missing_file_url_is_rejected(self, client, job_manager):
        response = client.post("/process-file", json={"jobId": "job-1"}, headers=HEADERS)

        assert response.status_code == 400
        job_manager.submit_job.assert_not_called()

    def test_missing_job_id_leaves_job_store_untouched(self, client):
        job_store = MagicMock()
        manager = JobManager(object_store=MagicMock(), job_store=job_store, translator=MagicMock())
        app.dependency_overrides[get_job_manager] = lambda: manager
        try:
            response = client.post("/process-file", json={"fileUrl": BODY["fileUrl"]}, headers=HEADERS)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 400
        job_store.update.assert_not_called()

    def test_numeric_job_id_is_accepted_as_string(self, client, job_manager):
        response = client.post("/process-file", json={"fileUrl": "gs://b/a.xlsx", "jobId": 42},
                               headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {"message": "Processing initiated", "jobId": "42"}
        job_manager.submit_job.assert_awaited_once_with("gs://b/a.xlsx", "42")

    @pytest.mark.parametrize("content", ['{"fileUrl": "gs://b/a.xlsx", "jobId": ', "[1, 2]"])
    def test_malformed_body_is_a_client_error(self, client, job_manager, content):
        response = client.post("/process-file", content=content,
                               headers={**HEADERS, "Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing fileUrl or jobId"}
        job_manager.submit_job.assert_not_called()

    @pytest.mark.parametrize("headers", [{}, {"x-api-key": "wrong"}])
    def test_requires_api_key(self, client, job_manager, headers):
        response = client.post("/process-file", json=BODY, headers=headers)

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        job_manager.submit_job.assert_not_called()

    def test_failure_before_response_is_server_error(self, client, job_manager):
        job_manager.submit_job.side_effect = RuntimeError("database down")

        response = client.post("/process-file", json=BODY, headers=HEADERS)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}


class TestServiceEndpoints:

    def test_root(self, client):
        assert client.get("/").json()["status"] == "operational"

    def test_health_reports_model_reachability(self, client, job_manager):
        job_manager.translator.client.health_check = AsyncMock(return_value=False)

        body = client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["services"] == {"api": True, "translation_model": False}
