import pytest
from fastapi.testclient import TestClient

from moisture_api.config import Config
from moisture_api.main import create_app
from moisture_api.models import MoistureReadingRow
from moisture_api.services import MoistureService, MoistureStore


@pytest.fixture
def config(tmp_path):
    return Config(
        database_url=f"sqlite:///{tmp_path / 'api.db'}",
        uploads_dir=tmp_path / "uploads",
        cors_origins=["*"],
    )


@pytest.fixture
def client(config):
    app = create_app(config)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def store(tmp_path):
    store = MoistureStore(f"sqlite:///{tmp_path / 'service.db'}")
    store.connect()
    yield store
    store.dispose()


@pytest.fixture
def service(store):
    return MoistureService(store)


@pytest.fixture
def insert_readings():
    """Write reading rows straight to a store, bypassing the service."""
    def _insert(store, rows):
        with store.session() as s:
            s.add_all([MoistureReadingRow(**row) for row in rows])
            s.commit()
    return _insert
