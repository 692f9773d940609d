"""Tests for /api/sensors."""

import pytest

from iot_platform.reference import SENSOR_TYPES


@pytest.fixture
def three_sensors(client):
    sensors = [
        {"id": "s1", "experiment_id": "exp-1", "type": "co2", "sensor_type_id": "co2", "status": "online"},
        {"id": "s2", "experiment_id": "exp-1", "type": "noise", "sensor_type_id": "noise", "status": "offline"},
        {"id": "s3", "experiment_id": "exp-2", "type": "co2", "sensor_type_id": "co2", "status": "online"},
    ]
    for sensor in sensors:
        assert client.post("/api/sensors", json=sensor).status_code == 201
    return sensors


def ids(response):
    return sorted(sensor["id"] for sensor in response.json()["data"])


def test_create_and_get(client, sensor_payload):
    response = client.post("/api/sensors", json=sensor_payload)
    assert response.status_code == 201
    assert response.json()["message"] == "Sensor created successfully"

    sensor = client.get("/api/sensors/sensor-1").json()["data"]
    assert sensor["experiment_id"] == "exp-001"
    assert sensor["type"] == "co2"
    assert "created_at" in sensor and "updated_at" in sensor


def test_free_form_location_same_on_create_and_update(client, sensor_payload):
    payload = {**sensor_payload, "location": "Salle 12", "metadata": ["Sensirion", "SCD30"]}
    response = client.post("/api/sensors", json=payload)
    assert response.status_code == 201

    sensor = client.get("/api/sensors/sensor-1").json()["data"]
    assert sensor["location"] == "Salle 12"
    assert sensor["metadata"] == ["Sensirion", "SCD30"]

    updated = client.put("/api/sensors/sensor-1", json={"location": {"room": "Salle 14"}})
    assert updated.status_code == 200
    assert updated.json()["data"]["location"] == {"room": "Salle 14"}


def test_create_requires_fields(client):
    response = client.post("/api/sensors", json={"id": "s1", "type": "co2"})
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: id, experiment_id, type"


def test_create_duplicate(client, sensor_payload):
    client.post("/api/sensors", json=sensor_payload)
    response = client.post("/api/sensors", json=sensor_payload)
    assert response.status_code == 409
    assert response.json()["error"] == "Sensor with this ID already exists"


def test_experiment_is_not_checked(client, sensor_payload):
    response = client.post("/api/sensors", json={**sensor_payload, "experiment_id": "does-not-exist"})
    assert response.status_code == 201


def test_list_without_filters(client, three_sensors):
    response = client.get("/api/sensors")
    assert response.json()["count"] == 3


@pytest.mark.parametrize(
    "params, expected",
    [
        ({"experiment_id": "exp-1"}, ["s1", "s2"]),
        ({"type": "co2"}, ["s1", "s3"]),
        ({"sensor_type_id": "noise"}, ["s2"]),
        ({"status": "online"}, ["s1", "s3"]),
        ({"experiment_id": "exp-1", "status": "online"}, ["s1"]),
        ({"experiment_id": "exp-3"}, []),
    ],
)
def test_list_filters(client, three_sensors, params, expected):
    assert ids(client.get("/api/sensors", params=params)) == expected


def test_adding_a_filter_never_grows_the_result(client, three_sensors):
    everything = set(ids(client.get("/api/sensors")))
    by_experiment = set(ids(client.get("/api/sensors", params={"experiment_id": "exp-1"})))
    by_both = set(ids(client.get("/api/sensors", params={"experiment_id": "exp-1", "type": "co2"})))
    assert by_both <= by_experiment <= everything


def test_empty_filter_values_are_ignored(client, three_sensors):
    response = client.get("/api/sensors", params={"status": "", "experiment_id": ""})
    assert response.json()["count"] == 3


def test_devices_is_an_alias(client, three_sensors):
    assert ids(client.get("/api/sensors/devices")) == ids(client.get("/api/sensors"))
    assert ids(client.get("/api/sensors/devices", params={"status": "offline"})) == ["s2"]


def test_types_catalog(client):
    body = client.get("/api/sensors/types").json()
    assert body["success"] is True
    assert body["count"] == len(SENSOR_TYPES)
    by_id = {sensor_type["id"]: sensor_type for sensor_type in body["data"]}
    assert by_id["temperature"]["unit"] == "°C"
    assert "_id" not in by_id["temperature"]


def test_types_falls_back_to_builtin_catalog(client, store):
    store.collection(store.SENSOR_TYPES).delete_many({})
    body = client.get("/api/sensors/types").json()
    assert body["count"] == len(SENSOR_TYPES)


def test_update(client, sensor_payload):
    client.post("/api/sensors", json=sensor_payload)
    response = client.put("/api/sensors/sensor-1", json={"status": "maintenance", "id": "other"})
    assert response.status_code == 200
    sensor = response.json()["data"]
    assert sensor["status"] == "maintenance"
    assert sensor["id"] == "sensor-1"


def test_update_unknown(client):
    response = client.put("/api/sensors/ghost", json={"status": "online"})
    assert response.status_code == 404
    assert response.json()["error"] == "Sensor not found"


def test_delete_keeps_measurements(client, sensor_payload, add_measurements):
    client.post("/api/sensors", json=sensor_payload)
    add_measurements("sensor-1", [(400, "2024-01-01T10:00:00Z")])

    response = client.delete("/api/sensors/sensor-1")
    assert response.json() == {"success": True, "message": "Sensor deleted successfully"}
    assert client.get("/api/sensors/sensor-1").status_code == 404

    remaining = client.get("/api/sensors/measurements", params={"sensor_id": "sensor-1"}).json()
    assert remaining["count"] == 1


def test_sensor_measurements(client, add_measurements):
    add_measurements("s1", [
        (1, "2024-01-01T10:00:00Z"),
        (2, "2024-01-02T10:00:00Z"),
        (3, "2024-01-03T10:00:00Z"),
    ])
    add_measurements("s2", [(9, "2024-01-02T10:00:00Z")])

    body = client.get("/api/sensors/s1/measurements").json()
    assert body["count"] == 3
    assert [m["value"] for m in body["data"]] == [3, 2, 1]

    limited = client.get("/api/sensors/s1/measurements", params={"limit": 1}).json()
    assert [m["value"] for m in limited["data"]] == [3]

    ranged = client.get(
        "/api/sensors/s1/measurements",
        params={"start_date": "2024-01-02T00:00:00Z", "end_date": "2024-01-02T23:59:59Z"},
    ).json()
    assert [m["value"] for m in ranged["data"]] == [2]


def test_sensor_measurements_of_unknown_sensor(client):
    body = client.get("/api/sensors/unknown/measurements").json()
    assert body == {"success": True, "count": 0, "data": []}
