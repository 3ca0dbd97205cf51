"""Document store and API client fixtures for tests."""
import pytest
from fastapi.testclient import TestClient

from download_server.adapters.document_store import (
    Collection,
    DocumentStoreFactory,
    LocalDocumentStore,
)
from download_server.main import create_app
from download_server.settings import Settings
from tests.consts import TEST_ADMIN_SECRET


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_backend="local",
        storage_dir=str(tmp_path / "storage"),
        admin_secret=TEST_ADMIN_SECRET,
        environment="test",
    )


@pytest.fixture
def document_store(settings) -> LocalDocumentStore:
    return DocumentStoreFactory.get_store(settings)


@pytest.fixture
def client(settings, document_store) -> TestClient:
    app = create_app(settings=settings, document_store=document_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seed_files(document_store):
    """Write raw file records straight into the files document."""
    def _seed(records):
        document_store.write(Collection.FILES, records)
        return records
    return _seed


@pytest.fixture
def seed_categories(document_store):
    def _seed(records):
        document_store.write(Collection.CATEGORIES, records)
        return records
    return _seed
