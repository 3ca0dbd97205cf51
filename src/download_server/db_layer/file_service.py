"""File record operations."""
import logging
import uuid
from typing import List, Optional, Tuple

from download_server.adapters.document_store import Collection, DocumentStore, Snapshot
from download_server.errors import NotFoundError, ValidationError
from download_server.schemas import (
    DEFAULT_CATEGORY,
    DEFAULT_SIZE,
    FileRecord,
    FileSummary,
    utc_timestamp,
)

logger = logging.getLogger(__name__)


class FileService:
    """Service for file records kept in the `files` collection"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def _load(self) -> Tuple[List[FileRecord], Snapshot]:
        snapshot = self.store.read(Collection.FILES)
        return [FileRecord.model_validate(r) for r in snapshot.records], snapshot

    def _save(self, files: List[FileRecord], snapshot: Snapshot) -> None:
        self.store.write(
            Collection.FILES,
            [f.to_document() for f in files],
            expected_revision=snapshot.revision,
        )

    @staticmethod
    def _index_of(files: List[FileRecord], file_id: str) -> int:
        for index, record in enumerate(files):
            if record.id == file_id:
                return index
        raise NotFoundError("File not found")

    def list_files(self) -> List[FileRecord]:
        files, _ = self._load()
        return files

    def list_summaries(self) -> List[FileSummary]:
        return [FileSummary.model_validate(f.model_dump()) for f in self.list_files()]

    def add_file(
        self,
        name: Optional[str],
        url: Optional[str],
        category: Optional[str] = None,
        description: Optional[str] = None,
        size: Optional[str] = None,
    ) -> FileRecord:
        """Append a new file record and return it."""
        if not name or not url:
            raise ValidationError("Name and URL are required")

        files, snapshot = self._load()
        record = FileRecord(
            id=str(uuid.uuid4()),
            name=name,
            url=url,
            category=category or DEFAULT_CATEGORY,
            description=description or "",
            size=size or DEFAULT_SIZE,
            upload_date=utc_timestamp(),
            download_count=0,
        )
        files.append(record)
        self._save(files, snapshot)

        logger.info(f"Added file {record.id} ({record.name})")
        return record

    def delete_file(self, file_id: str) -> FileRecord:
        """Remove the first record with `file_id` and return it."""
        files, snapshot = self._load()
        deleted = files.pop(self._index_of(files, file_id))
        self._save(files, snapshot)

        logger.info(f"Deleted file {file_id}")
        return deleted

    def record_download(self, file_id: str) -> FileRecord:
        """Bump the download counter of a file and return the updated record."""
        files, snapshot = self._load()
        record = files[self._index_of(files, file_id)]
        record.download_count += 1
        record.last_downloaded = utc_timestamp()
        self._save(files, snapshot)

        logger.info(f"File {file_id} downloaded ({record.download_count} total)")
        return record
