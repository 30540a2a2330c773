"""
Tests for health check endpoints.
"""

from unittest.mock import AsyncMock

from app.routes import health


class FakePool:
    def __init__(self, healthy: bool):
        self.healthy = healthy

    async def health_check(self):
        if self.healthy:
            return {"healthy": True, "connection_time_ms": 1.2, "pool_stats": {"pool_size": 2}}
        return {"healthy": False, "error": "connection refused"}


def test_healthz_endpoint(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_readyz_all_services_healthy(app, client, monkeypatch):
    app.state.db = FakePool(healthy=True)
    monkeypatch.setattr(health.redis_client, "ping", AsyncMock(return_value=True))

    response = client.get("/readyz")

    assert response.status_code == 200
    data = response.json()
    assert data["overall_ok"] is True
    assert data["checks"]["database"]["ok"] is True
    assert data["checks"]["redis"]["ok"] is True


def test_readyz_database_unhealthy(app, client, monkeypatch):
    app.state.db = FakePool(healthy=False)
    monkeypatch.setattr(health.redis_client, "ping", AsyncMock(return_value=True))

    response = client.get("/readyz")

    assert response.status_code == 503
    assert response.json()["checks"]["database"]["error"] == "connection refused"


def test_readyz_without_pool(app, client, monkeypatch):
    app.state.db = None
    monkeypatch.setattr(health.redis_client, "ping", AsyncMock(return_value=True))

    response = client.get("/readyz")

    assert response.status_code == 503
    assert response.json()["checks"]["database"]["ok"] is False


def test_readyz_redis_down_depends_on_fail_open(app, client, monkeypatch):
    app.state.db = FakePool(healthy=True)
    monkeypatch.setattr(health.redis_client, "ping", AsyncMock(return_value=False))

    monkeypatch.setattr(health.settings, "RATE_LIMIT_FAIL_OPEN", True)
    assert client.get("/readyz").status_code == 200

    monkeypatch.setattr(health.settings, "RATE_LIMIT_FAIL_OPEN", False)
    response = client.get("/readyz")
    assert response.status_code == 503
    assert response.json()["checks"]["redis"]["ok"] is False
