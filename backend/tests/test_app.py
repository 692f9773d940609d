"""Tests for the application-level endpoints and error handling."""

from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from iot_platform.main import create_app
from iot_platform.reference import CLUSTERS, PROTOCOLS, SENSOR_STATUS, SENSOR_TYPES
from iot_platform.services import MongoStore


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["timestamp"]


def test_health_reports_unreachable_database():
    class UnreachableDatabase:
        def command(self, *args, **kwargs):
            raise ServerSelectionTimeoutError("no servers")

    app = create_app(store=MongoStore(UnreachableDatabase()))
    # No context manager: the lifespan would try to create indexes
    response = TestClient(app).get("/api/health")
    assert response.status_code == 200
    assert response.json()["database"] == "disconnected"


def test_config(client):
    body = client.get("/api/config").json()
    assert body["success"] is True
    data = body["data"]
    assert set(data) == {"CLUSTERS", "PROTOCOLS", "SENSOR_TYPES", "SENSOR_STATUS"}
    assert len(data["CLUSTERS"]) == len(CLUSTERS) == 5
    assert data["CLUSTERS"]["2"]["label"] == CLUSTERS[2]["label"]
    assert len(data["PROTOCOLS"]) == len(PROTOCOLS)
    assert data["SENSOR_TYPES"]["co2"]["unit"] == SENSOR_TYPES["co2"]["unit"]
    assert len(data["SENSOR_STATUS"]) == len(SENSOR_STATUS)


def test_root_lists_endpoints(client):
    body = client.get("/").json()
    assert body["name"] == "IoT Platform API"
    assert "experiments" in body["endpoints"]


def test_unknown_route_is_an_envelope(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}


def test_wrong_method_is_an_envelope(client):
    response = client.patch("/api/experiments")
    assert response.status_code == 405
    assert response.json()["success"] is False


def test_malformed_json_is_a_400(client):
    response = client.post(
        "/api/experiments",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_startup_syncs_sensor_types(client, store):
    synced = store.find(MongoStore.SENSOR_TYPES)
    assert sorted(t["id"] for t in synced) == sorted(SENSOR_TYPES)


def test_cors_preflight(client):
    response = client.options(
        "/api/experiments",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers
