"""
Shared fixtures: an app wired to an in-memory MongoDB (mongomock).

No MongoDB server is needed to run the suite.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from iot_platform.main import create_app
from iot_platform.services import MongoStore


@pytest.fixture
def store():
    return MongoStore(mongomock.MongoClient()["iot_platform_test"])


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest.fixture
def client(app):
    # Context manager so the lifespan (indexes, sensor-type sync) runs
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def experiment_payload():
    return {
        "id": "exp-001",
        "title": "Air quality in classrooms",
        "city": "Paris",
        "school": "Lycée Victor Hugo",
        "cluster_id": 2,
        "protocol_id": "air-quality-monitoring",
        "status": "active",
        "location": {"type": "Point", "coordinates": [2.3522, 48.8566]},
    }


@pytest.fixture
def sensor_payload():
    return {
        "id": "sensor-1",
        "experiment_id": "exp-001",
        "type": "co2",
        "sensor_type_id": "co2",
        "name": "CO2 room 12",
        "status": "online",
    }


@pytest.fixture
def add_measurements(client):
    """Post measurements for a sensor: add_measurements("s1", [(value, iso_ts), ...])."""

    def _add(sensor_id, readings):
        created = []
        for value, timestamp in readings:
            response = client.post(
                "/api/sensors/measurements",
                json={"sensor_id": sensor_id, "value": value, "timestamp": timestamp},
            )
            assert response.status_code == 201, response.text
            created.append(response.json()["data"])
        return created

    return _add
