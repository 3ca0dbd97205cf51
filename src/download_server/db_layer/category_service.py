"""Category operations."""
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from download_server.adapters.document_store import Collection, DocumentStore, Snapshot
from download_server.errors import NotFoundError, ValidationError
from download_server.schemas import Category, utc_timestamp

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for categories kept in the `categories` collection"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def _load(self) -> Tuple[List[Category], Snapshot]:
        snapshot = self.store.read(Collection.CATEGORIES)
        return [Category.model_validate(r) for r in snapshot.records], snapshot

    def _save(self, categories: List[Category], snapshot: Snapshot) -> None:
        self.store.write(
            Collection.CATEGORIES,
            [c.to_document() for c in categories],
            expected_revision=snapshot.revision,
        )

    def list_categories(self) -> List[Dict[str, Any]]:
        """Categories exactly as stored, without validation."""
        return self.store.read(Collection.CATEGORIES).records

    def add_category(self, name: Optional[str], description: Optional[str] = None) -> Category:
        """Append a category. Names are unique ignoring case."""
        if not name:
            raise ValidationError("Category name is required")

        categories, snapshot = self._load()
        if any(isinstance(c.name, str) and c.name.lower() == name.lower() for c in categories):
            raise ValidationError("Category already exists")

        category = Category(
            id=str(uuid.uuid4()),
            name=name,
            description=description or "",
            created_date=utc_timestamp(),
        )
        categories.append(category)
        self._save(categories, snapshot)

        logger.info(f"Added category {category.id} ({category.name})")
        return category

    def delete_category(self, category_id: str) -> Category:
        categories, snapshot = self._load()
        for index, category in enumerate(categories):
            if category.id == category_id:
                break
        else:
            raise NotFoundError("Category not found")

        deleted = categories.pop(index)
        self._save(categories, snapshot)

        logger.info(f"Deleted category {category_id}")
        return deleted
