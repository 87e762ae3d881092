import pytest
from fastapi.testclient import TestClient

from ..config import Settings
from ..main import create_app
from ..services.ingestion_service import IngestionService
from ..services.query_service import QueryService
from ..stores.sqlite_store import SQLiteExpenseStore


@pytest.fixture
def settings(tmp_path):
    return Settings(db_path=tmp_path / "expenses.db")


@pytest.fixture
def store(settings):
    store = SQLiteExpenseStore(settings.db_path)
    store.init_schema()
    return store


@pytest.fixture
def ingestion(store):
    return IngestionService(store)


@pytest.fixture
def queries(store):
    return QueryService(store)


@pytest.fixture
def app(settings, store):
    app = create_app(settings)
    app.state.store = store
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
