"""Health check endpoint tests."""

import pytest

from templecloud import __version__


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "templecloud-api"
    assert data["version"] == __version__


@pytest.mark.asyncio
async def test_readiness_reports_database_and_cache(client):
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"] == {"database": "ok", "redis": "ok"}


@pytest.mark.asyncio
async def test_trace_id_is_echoed(client):
    response = await client.get("/api/v1/health/live", headers={"X-Trace-Id": "trc_fixed"})
    assert response.status_code == 200
    assert response.headers["X-Trace-Id"] == "trc_fixed"
