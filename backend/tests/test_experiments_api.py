"""Tests for /api/experiments."""


def test_list_empty(client):
    response = client.get("/api/experiments")
    assert response.status_code == 200
    assert response.json() == {"success": True, "count": 0, "data": []}


def test_create_and_fetch(client, experiment_payload):
    response = client.post("/api/experiments", json=experiment_payload)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Experiment created successfully"

    created = body["data"]
    assert created["id"] == "exp-001"
    assert created["title"] == "Air quality in classrooms"
    assert created["location"] == {"type": "Point", "coordinates": [2.3522, 48.8566]}
    assert isinstance(created["_id"], str) and len(created["_id"]) == 24
    assert created["created_at"] == created["updated_at"]

    fetched = client.get("/api/experiments/exp-001").json()
    assert fetched["success"] is True
    assert fetched["data"]["_id"] == created["_id"]
    assert fetched["data"]["title"] == created["title"]


def test_minimal_create_then_list(client):
    response = client.post("/api/experiments", json={"id": "exp-1", "title": "T"})
    assert response.status_code == 201

    listing = client.get("/api/experiments").json()
    assert listing["count"] == 1
    assert [e["id"] for e in listing["data"]] == ["exp-1"]


def test_unknown_fields_are_kept(client):
    client.post("/api/experiments", json={"id": "exp-1", "title": "T", "supervisor": "Mme Martin"})
    assert client.get("/api/experiments/exp-1").json()["data"]["supervisor"] == "Mme Martin"


def test_create_requires_id_and_title(client):
    response = client.post("/api/experiments", json={"id": "exp-1"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Missing required fields: id, title"}

    response = client.post("/api/experiments", json={"id": "", "title": "T"})
    assert response.status_code == 400

    assert client.get("/api/experiments").json()["count"] == 0


def test_create_duplicate_id_conflicts(client):
    client.post("/api/experiments", json={"id": "exp-1", "title": "First"})
    response = client.post("/api/experiments", json={"id": "exp-1", "title": "Second"})
    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "Experiment with this ID already exists"}

    listing = client.get("/api/experiments").json()
    assert listing["count"] == 1
    assert listing["data"][0]["title"] == "First"


def test_loose_fields_round_trip_unchanged(client):
    payload = {
        "id": "exp-1",
        "title": "T",
        "cluster_id": "2",
        "status": "archived",
        "location": {"lat": 48.85, "lng": 2.35},
    }
    assert client.post("/api/experiments", json=payload).status_code == 201

    stored = client.get("/api/experiments/exp-1").json()["data"]
    for key, value in payload.items():
        assert stored[key] == value


def test_location_without_coordinates_is_accepted(client):
    response = client.post("/api/experiments", json={"id": "exp-1", "title": "T", "location": "Paris 5e"})
    assert response.status_code == 201
    assert response.json()["data"]["location"] == "Paris 5e"


def test_non_string_title_is_a_400_envelope(client):
    response = client.post("/api/experiments", json={"id": "exp-1", "title": ["T"]})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Invalid request")


def test_get_unknown(client):
    response = client.get("/api/experiments/nope")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Experiment not found"}


def test_update_merges_and_keeps_identity(client, experiment_payload):
    created = client.post("/api/experiments", json=experiment_payload).json()["data"]

    response = client.put(
        "/api/experiments/exp-001",
        json={"status": "completed", "id": "hijack", "_id": "000000000000000000000000"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Experiment updated successfully"

    updated = body["data"]
    assert updated["status"] == "completed"
    assert updated["id"] == "exp-001"
    assert updated["_id"] == created["_id"]
    assert updated["title"] == experiment_payload["title"]
    assert updated["created_at"] == created["created_at"]
    assert updated["updated_at"] >= created["updated_at"]

    assert client.get("/api/experiments/hijack").status_code == 404


def test_update_unknown_does_not_create(client):
    response = client.put("/api/experiments/ghost", json={"title": "Boo"})
    assert response.status_code == 404
    assert client.get("/api/experiments").json()["count"] == 0


def test_delete(client):
    client.post("/api/experiments", json={"id": "exp-1", "title": "T"})

    response = client.delete("/api/experiments/exp-1")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Experiment deleted successfully"}

    assert client.get("/api/experiments/exp-1").status_code == 404
    assert client.delete("/api/experiments/exp-1").status_code == 404


def test_experiment_sensors(client, sensor_payload):
    client.post("/api/experiments", json={"id": "exp-001", "title": "T"})
    client.post("/api/sensors", json=sensor_payload)
    client.post("/api/sensors", json={**sensor_payload, "id": "sensor-2"})
    client.post("/api/sensors", json={**sensor_payload, "id": "sensor-x", "experiment_id": "exp-002"})

    body = client.get("/api/experiments/exp-001/sensors").json()
    assert body["success"] is True
    assert body["count"] == 2
    assert sorted(s["id"] for s in body["data"]) == ["sensor-1", "sensor-2"]


def test_experiment_sensors_of_unknown_experiment_is_empty(client):
    body = client.get("/api/experiments/nope/sensors").json()
    assert body == {"success": True, "count": 0, "data": []}
