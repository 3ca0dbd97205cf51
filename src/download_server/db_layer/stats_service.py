"""Aggregate statistics over both collections."""
import logging
from datetime import datetime, timezone

from download_server.adapters.document_store import Collection, DocumentStore
from download_server.schemas import (
    RECENT_FILES_LIMIT,
    Category,
    CategoryStat,
    FileRecord,
    Stats,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class StatsService:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get_stats(self) -> Stats:
        """Totals, per-category file counts and the most recently uploaded files.

        Files are matched to categories by exact name; files whose category has
        no Category entry are counted in the totals only.
        """
        files = [FileRecord.model_validate(r) for r in self.store.read(Collection.FILES).records]
        categories = [
            Category.model_validate(r) for r in self.store.read(Collection.CATEGORIES).records
        ]

        category_stats = [
            CategoryStat(
                name=category.name,
                file_count=sum(1 for f in files if f.category == category.name),
            )
            for category in categories
        ]
        # undated files sort after every dated one
        recent_files = sorted(
            files,
            key=lambda f: parse_timestamp(f.upload_date) or _OLDEST,
            reverse=True,
        )[:RECENT_FILES_LIMIT]

        return Stats(
            total_files=len(files),
            total_categories=len(categories),
            total_downloads=sum(f.download_count for f in files),
            category_stats=category_stats,
            recent_files=[f.to_document() for f in recent_files],
        )
