from datetime import datetime, timedelta, timezone


def test_post_reading_returns_created_reading(client):
    response = client.post("/api/readings", json={"value": 512, "humidity": 61.5})

    assert response.status_code == 201
    body = response.json()
    assert body["value"] == 512
    assert body["deviceId"] == "default-device"
    assert body["source"] == "arduino"
    assert body["humidity"] == 61.5
    assert isinstance(body["id"], int)
    assert "createdAt" in body and "updatedAt" in body
    assert "lat" not in body


def test_post_reading_keeps_explicit_fields(client):
    response = client.post(
        "/api/readings",
        json={"value": 0.25, "source": "esp32", "deviceId": "field-3", "temperature": 29.5, "tilt": 3},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["value"] == 0.25
    assert body["source"] == "esp32"
    assert body["deviceId"] == "field-3"
    assert body["temperature"] == 29.5
    assert body["tilt"] == 3


def test_post_reading_ignores_non_numeric_extras(client):
    response = client.post("/api/readings", json={"value": 10, "humidity": "nan", "lat": "14.5"})

    assert response.status_code == 201
    body = response.json()
    assert "humidity" not in body
    assert "lat" not in body


def test_post_reading_rejects_bad_value_and_stores_nothing(client):
    for payload in ({}, {"value": "12"}, {"value": True}, {"value": None}, {"deviceId": "x"}):
        response = client.post("/api/readings", json=payload)
        assert response.status_code == 400, payload
        assert "value" in response.json()["detail"]

    assert client.get("/api/readings").json() == []


def test_latest_is_empty_object_when_no_readings(client):
    response = client.get("/api/readings/latest")

    assert response.status_code == 200
    assert response.json() == {}


def test_latest_picks_greatest_created_at(client, insert_readings):
    t1 = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)
    store = client.app.state.store
    # inserted out of order on purpose
    insert_readings(store, [
        {"value": 3, "device_id": "x", "created_at": t1 + timedelta(minutes=2)},
        {"value": 1, "device_id": "x", "created_at": t1},
        {"value": 2, "device_id": "x", "created_at": t1 + timedelta(minutes=1)},
        {"value": 99, "device_id": "other", "created_at": t1 - timedelta(days=1)},
    ])

    latest = client.get("/api/readings/latest", params={"deviceId": "x"}).json()
    assert latest["value"] == 3
    assert latest["createdAt"].startswith("2024-05-01T08:02:00")

    other = client.get("/api/readings/latest", params={"deviceId": "other"}).json()
    assert other["value"] == 99

    assert client.get("/api/readings/latest", params={"deviceId": "nobody"}).json() == {}


def test_latest_without_device_filter_spans_devices(client):
    client.post("/api/readings", json={"value": 1, "deviceId": "a"})
    client.post("/api/readings", json={"value": 2, "deviceId": "b"})

    assert client.get("/api/readings/latest").json()["deviceId"] == "b"


def test_history_is_newest_first_and_filtered(client):
    for value in (1, 2, 3):
        client.post("/api/readings", json={"value": value, "deviceId": "a"})
    client.post("/api/readings", json={"value": 10, "deviceId": "b"})

    values = [r["value"] for r in client.get("/api/readings", params={"deviceId": "a"}).json()]
    assert values == [3, 2, 1]

    assert len(client.get("/api/readings").json()) == 4


def test_history_limit_is_clamped(client, insert_readings):
    insert_readings(client.app.state.store, [{"value": i, "device_id": "bulk"} for i in range(501)])

    assert len(client.get("/api/readings", params={"limit": 1000}).json()) == 500
    assert len(client.get("/api/readings", params={"limit": 0}).json()) == 50
    assert len(client.get("/api/readings", params={"limit": -3}).json()) == 1
    assert len(client.get("/api/readings", params={"limit": 7}).json()) == 7
    assert len(client.get("/api/readings", params={"limit": "abc"}).json()) == 50
    assert len(client.get("/api/readings").json()) == 50


def test_history_limit_zero_returns_one_when_few_readings(client):
    client.post("/api/readings", json={"value": 1})

    response = client.get("/api/readings", params={"limit": 0})

    assert response.status_code == 200
    assert len(response.json()) == 1


def test_legacy_moisture_routes(client):
    response = client.post("/api/moisture", json={"value": 400, "deviceId": "field-1"})
    assert response.status_code == 201

    assert client.get("/api/moisture/latest").json()["value"] == 400
    assert len(client.get("/api/moisture").json()) == 1
    assert client.get("/api/readings/latest").json()["deviceId"] == "field-1"


def test_legacy_routes_hidden_from_schema(client):
    paths = client.get("/openapi.json").json()["paths"]

    assert "/api/readings" in paths
    assert "/api/moisture" not in paths


def test_store_failure_is_generic_500(client, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(client.app.state.moisture_service, "save_moisture", broken)

    response = client.post("/api/readings", json={"value": 1})

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to save moisture reading"}


def test_post_reading_echoes_whole_values_as_integers(client):
    whole = client.post("/api/readings", json={"value": 512}).json()
    fractional = client.post("/api/readings", json={"value": 0.5}).json()

    assert whole["value"] == 512 and isinstance(whole["value"], int)
    assert fractional["value"] == 0.5

    history = client.get("/api/readings").json()
    assert [r["value"] for r in history] == [0.5, 512]
    assert isinstance(history[1]["value"], int)


def test_post_reading_rejects_value_too_big_for_a_float(client):
    response = client.post(
        "/api/readings",
        content='{"value": 1' + "0" * 400 + "}",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert "value" in response.json()["detail"]
    assert client.get("/api/readings").json() == []


def test_post_reading_ignores_coordinate_too_big_for_a_float(client):
    response = client.post(
        "/api/readings",
        content='{"value": 1, "deviceId": "huge", "lat": 1' + "0" * 400 + ', "lng": 2}',
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 201
    body = response.json()
    assert "lat" not in body
    assert body["lng"] == 2
    assert client.get("/api/device/huge/location").status_code == 404
