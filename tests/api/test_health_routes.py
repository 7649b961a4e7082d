"""Health Routes — liveness and readiness probes."""

from cattery.main import app


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "healthy"
    assert body["service"] == "cattery-api"
    assert body["environment"] == "test"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    body = res.json()
    assert body["checks"]["database"] == "healthy"
    assert body["latency_ms"] >= 0


async def test_readiness_without_gateway_is_503(client):
    app.state.gateway = None
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "gateway_not_initialized"


async def test_readiness_with_failing_database_is_503(client, gateway, monkeypatch):
    async def unhealthy():
        return False

    monkeypatch.setattr(gateway, "health_check", unhealthy)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"
