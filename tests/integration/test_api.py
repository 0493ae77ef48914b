"""
Integration tests for the API endpoints.
"""

import logging

import pytest
import pytest_asyncio
from httpx import AsyncClient
from prometheus_client import REGISTRY

from cqueue.constants import REQUEST_ID_HEADER, JobStatus
from cqueue.store import InMemoryJobStore


class TestJobAPI:
    """Integration tests for job API endpoints."""

    @pytest_asyncio.fixture
    async def created_job(self, client: AsyncClient) -> dict:
        """Submit a job for testing."""
        response = await client.put("/v1/jobs/enqueue", json={"kind": "TIME_CRITICAL"})
        return response.json()

    @pytest.mark.asyncio
    async def test_enqueue_success(self, client: AsyncClient):
        """Test successful job submission."""
        response = await client.put("/v1/jobs/enqueue", json={"kind": "TIME_CRITICAL"})

        assert response.status_code == 201
        assert response.json() == {"id": 0}

    @pytest.mark.asyncio
    async def test_enqueue_accepts_post(self, client: AsyncClient):
        first = await client.post("/v1/jobs/enqueue", json={"kind": "A"})
        second = await client.post("/v1/jobs/enqueue", json={"kind": "B"})

        assert first.json()["id"] == 0
        assert second.json()["id"] == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{}, {"kind": ""}, {"kind": "x" * 129}, {"kind": "X", "extra": 1}],
    )
    async def test_enqueue_validation(self, client: AsyncClient, body: dict):
        """Test submission with an invalid body."""
        response = await client.put("/v1/jobs/enqueue", json=body)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_dequeue_returns_job(self, client: AsyncClient, created_job: dict):
        response = await client.post("/v1/jobs/dequeue")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == created_job["id"]
        assert data["kind"] == "TIME_CRITICAL"
        assert data["status"] == JobStatus.DEQUEUED
        assert data["dequeued_at"] is not None

    @pytest.mark.asyncio
    async def test_dequeue_empty(self, client: AsyncClient):
        """An empty queue is a 204, not an error."""
        response = await client.post("/v1/jobs/dequeue")

        assert response.status_code == 204
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, client: AsyncClient, created_job: dict):
        """Submit, pull, conclude, then read back."""
        job_id = created_job["id"]

        await client.post("/v1/jobs/dequeue")
        response = await client.post(f"/v1/jobs/{job_id}/conclude")

        assert response.status_code == 200
        assert response.json()["status"] == JobStatus.CONCLUDED

        response = await client.get(f"/v1/jobs/{job_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == JobStatus.CONCLUDED
        assert data["concluded_at"] is not None

    @pytest.mark.asyncio
    async def test_conclude_queued_job_conflicts(
        self,
        client: AsyncClient,
        created_job: dict,
    ):
        response = await client.post(f"/v1/jobs/{created_job['id']}/conclude")

        assert response.status_code == 409
        data = response.json()
        assert data["error"] == "invalid_transition"
        assert "queued" in data["detail"]
        assert data["request_id"]
        assert "allowed: pull, cancel" in data["detail"]

    @pytest.mark.asyncio
    async def test_conclude_not_found(self, client: AsyncClient):
        response = await client.post("/v1/jobs/99/conclude")

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "not_found"
        assert "99" in data["detail"]

    @pytest.mark.asyncio
    async def test_cancel_then_conclude(self, client: AsyncClient, created_job: dict):
        job_id = created_job["id"]

        response = await client.post(f"/v1/jobs/{job_id}/cancel")
        assert response.status_code == 200
        assert response.json()["status"] == JobStatus.CANCELLED

        assert (await client.post("/v1/jobs/dequeue")).status_code == 204
        assert (await client.post(f"/v1/jobs/{job_id}/conclude")).status_code == 409
        assert (await client.post(f"/v1/jobs/{job_id}/cancel")).status_code == 409

    @pytest.mark.asyncio
    async def test_cancel_terminal_job_conflicts(self, client: AsyncClient, created_job: dict):
        job_id = created_job["id"]
        await client.post(f"/v1/jobs/{job_id}/cancel")

        response = await client.post(f"/v1/jobs/{job_id}/cancel")

        assert response.status_code == 409
        assert "job is terminal" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_conclude_legacy_path(self, client: AsyncClient, created_job: dict):
        """Consumers of the old `/jobs/conclude/{id}` route keep working."""
        job_id = created_job["id"]
        await client.post("/v1/jobs/dequeue")

        response = await client.post(f"/v1/jobs/conclude/{job_id}")

        assert response.status_code == 200
        assert response.json()["status"] == JobStatus.CONCLUDED
        assert (await client.post(f"/v1/jobs/conclude/{job_id}")).status_code == 409
        assert (await client.post("/v1/jobs/conclude/99")).status_code == 404

    @pytest.mark.asyncio
    async def test_each_transition_logged_once(
        self,
        client: AsyncClient,
        caplog: pytest.LogCaptureFixture,
    ):
        caplog.set_level(logging.INFO, logger="cqueue")

        await client.put("/v1/jobs/enqueue", json={"kind": "X"})
        await client.post("/v1/jobs/dequeue")
        await client.post("/v1/jobs/0/conclude")

        messages = [record.getMessage() for record in caplog.records]
        assert messages.count("Job submitted") == 1
        assert messages.count("Job dequeued") == 1
        assert messages.count("Job concluded") == 1

    @pytest.mark.asyncio
    async def test_cancel_not_found(self, client: AsyncClient):
        response = await client.post("/v1/jobs/5/cancel")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_get_job_not_found(self, client: AsyncClient):
        response = await client.get("/v1/jobs/12345")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_get_job_negative_id(self, client: AsyncClient):
        response = await client.get("/v1/jobs/-1")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, store: InMemoryJobStore):
        for kind in ("A", "B", "C"):
            store.submit(kind)
        store.pull()
        store.cancel(2)

        response = await client.get("/v1/jobs/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["queued"] == 1
        assert data["dequeued"] == 1
        assert data["concluded"] == 0
        assert data["cancelled"] == 1
        assert data["total"] == 3
        assert data["uptime_millis"] >= 0

    @pytest.mark.asyncio
    async def test_list_jobs(self, client: AsyncClient, store: InMemoryJobStore):
        for _ in range(3):
            store.submit("X")
        store.pull()

        response = await client.get("/v1/jobs")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [job["id"] for job in data["jobs"]] == [0, 1, 2]
        assert data["has_next"] is False

    @pytest.mark.asyncio
    async def test_list_jobs_with_status_filter(
        self,
        client: AsyncClient,
        store: InMemoryJobStore,
    ):
        for _ in range(3):
            store.submit("X")
        store.pull()

        response = await client.get("/v1/jobs?status=queued&page_size=1")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [job["id"] for job in data["jobs"]] == [1]
        assert data["has_next"] is True

    @pytest.mark.asyncio
    async def test_request_id_is_propagated(self, client: AsyncClient):
        response = await client.get("/v1/jobs/stats", headers={REQUEST_ID_HEADER: "abc123"})

        assert response.headers[REQUEST_ID_HEADER] == "abc123"


class TestHealthAPI:
    """Integration tests for health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_live_and_ready(self, client: AsyncClient):
        assert (await client.get("/live")).json() == {"alive": True}
        assert (await client.get("/ready")).json() == {"ready": True}

    @pytest.mark.asyncio
    async def test_metrics(self, client: AsyncClient):
        await client.put("/v1/jobs/enqueue", json={"kind": "metrics-sample"})

        response = await client.get("/metrics")

        assert response.status_code == 200
        body = response.text
        assert 'jobs_submitted_total{kind="metrics-sample"}' in body
        assert 'job_queue_depth{status="queued"} 1.0' in body

    @pytest.mark.asyncio
    async def test_api_requests_labelled_by_route_template(
        self,
        client: AsyncClient,
        store: InMemoryJobStore,
    ):
        labels = {"method": "GET", "endpoint": "/v1/jobs/{job_id}", "status": "200"}
        before = REGISTRY.get_sample_value("api_requests_total", labels) or 0
        store.submit("X")

        response = await client.get("/v1/jobs/0")

        assert response.status_code == 200
        assert REGISTRY.get_sample_value("api_requests_total", labels) == before + 1
        assert (await client.get("/v1/jobs/stats")).status_code == 200
