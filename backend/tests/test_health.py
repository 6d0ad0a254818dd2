"""Tests for health check, root and config endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test that health endpoint returns ok status."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "1.0.0"


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient):
    """Test that root endpoint returns API info."""
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Maze Lab"
    assert "version" in data
    assert "docs" in data


@pytest.mark.asyncio
async def test_config_endpoint(client: AsyncClient):
    """Test that the simulation limits are exposed."""
    response = await client.get("/config")
    assert response.status_code == 200
    data = response.json()
    assert data["max_advance_steps"] == 1000
    assert data["flag_exit_from_start"] is True
    assert data["comparison_iteration_factor"] == 2


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient):
    response = await client.get("/health")
    assert len(response.headers["X-Request-ID"]) > 0
