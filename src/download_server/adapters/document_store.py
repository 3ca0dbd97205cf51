"""
Document store: named collections of records, each persisted as one JSON array.

Every collection lives in a single document. Reads return the whole array with
the document's revision token; writes replace the whole array. Passing the
revision from a read into the following write makes the write fail with
`RevisionConflictError` if someone else wrote in between.
"""
import hashlib
import json
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from download_server.adapters.github import GitHubContentsClient
from download_server.errors import ConfigurationError, RevisionConflictError, UpstreamError
from download_server.settings import Settings
from download_server.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class Collection(str, Enum):
    FILES = "files"
    CATEGORIES = "categories"


class _LatestRevision:
    def __repr__(self) -> str:
        return "LATEST_REVISION"


# Default for `write`: look the current revision up right before writing.
LATEST_REVISION = _LatestRevision()

Revision = Union[Optional[str], _LatestRevision]


@dataclass
class Snapshot:
    """Records of a collection as read, plus the revision they were read at.

    `revision` is None when the document does not exist yet.
    """
    records: List[Record] = field(default_factory=list)
    revision: Optional[str] = None


def encode_records(records: List[Record]) -> bytes:
    return json.dumps(records, indent=2, ensure_ascii=False).encode("utf-8")


def decode_records(data: bytes, path: str) -> List[Record]:
    """Parse a stored document. An empty or `null` document counts as no records."""
    if not data.strip():
        return []
    try:
        decoded = json.loads(data.decode("utf-8"))
    except ValueError as e:
        raise UpstreamError(f"{path} does not contain valid JSON", error=str(e)) from e
    if decoded is None:
        return []
    if not isinstance(decoded, list):
        raise UpstreamError(f"{path} does not contain a JSON array")
    return decoded


class DocumentStore:
    """Base class for document stores (to be extended by specific implementations)"""

    def __init__(self, paths: Dict[Collection, str]):
        self.paths = paths

    def path_for(self, collection: Collection) -> str:
        return self.paths[Collection(collection)]

    def read(self, collection: Collection) -> Snapshot:
        raise NotImplementedError

    def write(
        self,
        collection: Collection,
        records: List[Record],
        expected_revision: Revision = LATEST_REVISION,
    ) -> Optional[str]:
        """Replace the collection's document with `records`.

        Args:
            collection: Collection to write
            records: Full record list; this is the new document content
            expected_revision: Revision the caller read. None means the caller saw
                no document. LATEST_REVISION skips the check and overwrites
                whatever is current.

        Returns:
            The new revision token
        """
        raise NotImplementedError


class GitHubDocumentStore(DocumentStore):
    """Collections stored as JSON files in a GitHub repository."""

    def __init__(self, client: GitHubContentsClient, paths: Dict[Collection, str]):
        super().__init__(paths)
        self.client = client

    @log_execution_time
    def read(self, collection: Collection) -> Snapshot:
        path = self.path_for(collection)
        content = self.client.get_content(path)
        if content is None:
            return Snapshot()
        return Snapshot(records=decode_records(content.data, path), revision=content.sha)

    @log_execution_time
    def write(
        self,
        collection: Collection,
        records: List[Record],
        expected_revision: Revision = LATEST_REVISION,
    ) -> Optional[str]:
        path = self.path_for(collection)
        if expected_revision is LATEST_REVISION:
            expected_revision = self.client.get_revision(path)
        new_revision = self.client.put_content(
            path,
            encode_records(records),
            revision=expected_revision,
            message=f"Update {path}",
        )
        logger.info(f"Wrote {len(records)} records to {path} at {new_revision}")
        return new_revision


class LocalDocumentStore(DocumentStore):
    """Collections stored as JSON files on the local file system.

    The revision token is the SHA-1 of the file bytes, so any change to the
    file, including one made by hand, invalidates earlier reads.
    """

    def __init__(self, storage_dir: Union[str, Path], paths: Dict[Collection, str]):
        super().__init__(paths)
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        logger.info(f"LocalDocumentStore initialized at: {self.storage_dir}")

    def _file(self, collection: Collection) -> Path:
        return self.storage_dir / self.path_for(collection)

    @staticmethod
    def _revision_of(data: bytes) -> str:
        return hashlib.sha1(data).hexdigest()

    def _load(self, collection: Collection):
        file_path = self._file(collection)
        if not file_path.exists():
            return None
        return file_path.read_bytes()

    @log_execution_time
    def read(self, collection: Collection) -> Snapshot:
        data = self._load(collection)
        if data is None:
            return Snapshot()
        return Snapshot(
            records=decode_records(data, self.path_for(collection)),
            revision=self._revision_of(data),
        )

    @log_execution_time
    def write(
        self,
        collection: Collection,
        records: List[Record],
        expected_revision: Revision = LATEST_REVISION,
    ) -> Optional[str]:
        path = self.path_for(collection)
        data = encode_records(records)
        with self._lock:
            if expected_revision is not LATEST_REVISION:
                current = self._load(collection)
                current_revision = self._revision_of(current) if current is not None else None
                if current_revision != expected_revision:
                    raise RevisionConflictError(
                        f"{path} was modified concurrently",
                        error=f"{path} is at {current_revision} but expected {expected_revision}",
                    )
            file_path = self._file(collection)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
            tmp_path.write_bytes(data)
            tmp_path.replace(file_path)
        logger.info(f"Wrote {len(records)} records to {file_path}")
        return self._revision_of(data)


class DocumentStoreFactory:
    """Builds the document store selected by the settings."""

    @staticmethod
    def get_store(settings: Settings) -> DocumentStore:
        paths = {
            Collection.FILES: settings.files_document,
            Collection.CATEGORIES: settings.categories_document,
        }
        if settings.storage_backend == "local":
            return LocalDocumentStore(settings.storage_dir, paths)

        if not settings.github_owner or not settings.github_repo:
            raise ConfigurationError("GITHUB_OWNER and GITHUB_REPO must be set for the github backend")
        if not settings.github_token:
            logger.warning("GITHUB_TOKEN is not set; writes to the repository will be rejected")
        client = GitHubContentsClient(
            owner=settings.github_owner,
            repo=settings.github_repo,
            token=settings.github_token,
            api_url=settings.github_api_url,
            branch=settings.github_branch,
            timeout=settings.request_timeout,
        )
        return GitHubDocumentStore(client, paths)
