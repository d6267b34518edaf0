import asyncio
import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from moisture_api import main
from moisture_api.config import Config
from moisture_api.services import MoistureStore


def test_root_lists_endpoints(client):
    body = client.get("/").json()

    assert body["name"] == "Soil Moisture Collector API"
    assert "readings" in body["endpoints"]


def test_health_pings_database(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"app": "ok", "db": "ok"}


def test_health_reports_database_error(client, monkeypatch):
    monkeypatch.setattr(client.app.state.store, "ping", lambda: False)

    response = client.get("/health")

    assert response.status_code == 500
    assert response.json()["db"] == "error"


def test_api_calls_are_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="moisture_api.middleware"):
        client.post("/api/readings", json={"value": 5, "deviceId": "log-me"})
        client.get("/api/readings", params={"deviceId": "log-me"})
        client.get("/health")

    messages = [r.getMessage() for r in caplog.records if r.name == "moisture_api.middleware"]
    assert "[API] → POST /api/readings" in messages
    assert any(m.startswith("[API]    body=") and "log-me" in m for m in messages)
    assert any(m.startswith("[API] ← POST /api/readings 201 ") and m.endswith("ms") for m in messages)
    assert '[API] → GET /api/readings query={"deviceId": "log-me"}' in messages
    assert not any("/health" in m for m in messages)


def test_upload_bodies_are_not_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="moisture_api.middleware"):
        client.post("/api/uploads", files={"file": ("a.glb", b"secret-bytes", "model/gltf-binary")})

    assert "secret-bytes" not in caplog.text
    assert "body=" not in caplog.text


def test_startup_fails_without_database(tmp_path):
    config = Config(
        database_url=f"sqlite:///{tmp_path / 'missing' / 'dir' / 'x.db'}",
        uploads_dir=tmp_path / "uploads",
    )
    app = main.create_app(config)

    async def start():
        async with main.lifespan(app):
            pytest.fail("started without a database")

    with pytest.raises(OperationalError):
        asyncio.run(start())

    assert app.state.moisture_service is None


def test_app_uses_provided_store(tmp_path):
    store = MoistureStore(f"sqlite:///{tmp_path / 'given.db'}")
    store.connect()
    app = main.create_app(Config(database_url="sqlite://", uploads_dir=tmp_path / "u"), store=store)

    with TestClient(app) as client:
        assert client.app.state.store is store
        assert client.post("/api/readings", json={"value": 1}).status_code == 201


def test_run_exits_when_database_unreachable(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'x.db'}")
    monkeypatch.setenv("UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(main.uvicorn, "run", lambda *a, **kw: pytest.fail("server started"))

    with pytest.raises(SystemExit) as exc:
        main.run()

    assert exc.value.code == 1


def test_run_serves_on_configured_port(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'ok.db'}")
    monkeypatch.setenv("UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("PORT", "8123")
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kw: calls.append(kw))

    main.run()

    assert calls == [{"host": "0.0.0.0", "port": 8123}]


def test_importing_main_builds_no_app():
    assert not hasattr(main, "app")
