from fastapi import status
from fastapi.testclient import TestClient

from download_server.adapters.document_store import Collection, LocalDocumentStore, Snapshot
from download_server.auth import CredentialVerifier
from download_server.errors import UpstreamError
from download_server.main import create_app
from tests.consts import ADMIN_HEADERS


class UnreachableStore(LocalDocumentStore):
    def read(self, collection):
        raise UpstreamError("Cannot reach GitHub", error="Connection refused")


class BrokenStore(LocalDocumentStore):
    def read(self, collection):
        return Snapshot(records=[{"id": "1", "name": "A", "url": "http://x"}], revision="r1")

    def write(self, collection, records, expected_revision=None):
        raise RuntimeError("disk full")


def make_client(settings, store_class) -> TestClient:
    store = store_class(
        settings.storage_dir,
        {Collection.FILES: settings.files_document, Collection.CATEGORIES: settings.categories_document},
    )
    return TestClient(create_app(settings=settings, document_store=store))


def test_unknown_route(client: TestClient):
    response = client.get("/api/nothing-here")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Endpoint not found"
    assert "POST /api/admin/stats" in data["availableEndpoints"]


def test_wrong_method_is_reported_as_unknown_route(client: TestClient):
    response = client.get("/api/admin/stats")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert "availableEndpoints" in response.json()


def test_malformed_json_body(client: TestClient):
    response = client.post(
        "/api/admin/files",
        content=b"{not json",
        headers={**ADMIN_HEADERS, "Content-Type": "application/json"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["success"] is False


def test_upstream_failure_on_read(settings):
    client = make_client(settings, UnreachableStore)

    response = client.get("/api/files")
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {
        "success": False,
        "message": "Error fetching files",
        "error": "Connection refused",
    }

    response = client.post("/api/admin/stats", headers=ADMIN_HEADERS)
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Error fetching stats"


def test_unexpected_failure_on_write(settings):
    client = make_client(settings, BrokenStore)

    response = client.get("/api/download/1", follow_redirects=False)
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {
        "success": False,
        "message": "Error downloading file",
        "error": "disk full",
    }


def test_stale_revision_surfaces_as_error(settings, document_store, seed_files):
    seed_files([{"id": "1", "name": "A", "url": "http://x"}])

    class StaleStore(LocalDocumentStore):
        def read(self, collection):
            snapshot = super().read(collection)
            # someone else writes between our read and our write
            document_store.write(collection, snapshot.records + [{"id": "2", "name": "B", "url": "http://y"}])
            return snapshot

    client = make_client(settings, StaleStore)
    response = client.delete("/api/admin/files/1", headers=ADMIN_HEADERS)
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Error deleting file"

    ids = [r["id"] for r in document_store.read("files").records]
    assert ids == ["1", "2"]


def test_unhandled_error_response_carries_cors_headers(settings, document_store):
    class ExplodingVerifier(CredentialVerifier):
        def verify(self, candidate):
            raise RuntimeError("verifier crashed")

    app = create_app(settings=settings, document_store=document_store, credential_verifier=ExplodingVerifier())
    client = TestClient(app)

    response = client.post(
        "/api/admin/stats",
        headers={**ADMIN_HEADERS, "Origin": "http://example.com"},
    )
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.json() == {
        "success": False,
        "message": "Internal server error",
        "error": "Something went wrong",
    }
