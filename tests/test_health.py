from pymongo.errors import ServerSelectionTimeoutError

import database
import health.routes


async def test_health_reports_connected_database(client, monkeypatch):
    async def ping():
        return True

    monkeypatch.setattr(health.routes, "ping_database", ping)
    response = await client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["uptime"] >= 0
    assert body["timestamp"].endswith("Z")


async def test_health_reports_disconnected_database(client):
    database.client = None
    response = await client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "degraded"
    assert body["database"] == "disconnected"


async def test_root_banner(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["health"] == "/api/health"


async def test_unknown_route_is_json_404(client):
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert "detail" in response.json()


async def test_health_initialises_models_after_failed_startup(client, monkeypatch):
    async def ping():
        return True

    monkeypatch.setattr(health.routes, "ping_database", ping)
    monkeypatch.setattr(database, "ready", False)

    response = await client.get("/api/health")
    assert response.json()["database"] == "connected"
    assert database.ready is True


async def test_health_degraded_while_models_uninitialised(client, monkeypatch):
    async def ping():
        return True

    async def unreachable(**kwargs):
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(health.routes, "ping_database", ping)
    monkeypatch.setattr(database, "init_beanie", unreachable)
    monkeypatch.setattr(database, "ready", False)

    response = await client.get("/api/health")
    assert response.json()["status"] == "degraded"
    assert response.json()["database"] == "disconnected"


async def test_data_routes_recover_after_failed_startup(client, monkeypatch):
    monkeypatch.setattr(database, "ready", False)
    response = await client.get("/api/doctors")
    assert response.status_code == 200
    assert response.json() == []
