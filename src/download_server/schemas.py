####################################
# --- Record and request/response schemas --- #
####################################

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_SIZE = "Unknown"
RECENT_FILES_LIMIT = 5

Document = Dict[str, Any]


def utc_timestamp() -> str:
    """Current time as ISO-8601 with milliseconds and a `Z` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire and in stored documents."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredRecord(CamelModel):
    """Base for records read from a document.

    Stored documents may be edited by hand, so no field is required and values
    are taken as they are. `to_document` writes back exactly the keys that were
    read or set, nulls and unknown keys included.
    """
    model_config = ConfigDict(extra="allow")

    id: Any = None

    def to_document(self) -> Document:
        document = self.model_dump(by_alias=True, exclude_unset=True)
        document.update(self.model_extra or {})
        return document


class FileRecord(StoredRecord):
    """A downloadable file as stored in the files document."""
    name: Any = None
    url: Any = Field(None, description="Where downloads are redirected to")
    category: Any = None
    description: Any = None
    size: Any = None
    upload_date: Any = None
    download_count: int = 0
    last_downloaded: Any = None

    @field_validator("download_count", mode="before")
    @classmethod
    def default_download_count(cls, v):
        try:
            return int(v or 0)
        except (TypeError, ValueError):
            return 0


class Category(StoredRecord):
    """A category as stored in the categories document."""
    name: Any = None
    description: Any = None
    created_date: Any = None


class FileSummary(CamelModel):
    """Public projection of a file record; the download url is not exposed."""
    id: Any = None
    name: Any = None
    category: Any = None
    description: Any = None
    size: Any = None
    upload_date: Any = None
    download_count: int = 0

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "9b2f0a0e-5a1c-4a57-9a55-3f1f7e1c2d4b",
                "name": "Installer",
                "category": "Software",
                "description": "Windows installer",
                "size": "24 MB",
                "uploadDate": "2024-01-01T12:34:56.000Z",
                "downloadCount": 3,
            }
        }
    )



class CreateFileRequest(BaseModel):
    """Body of `POST /api/admin/files`. Presence of name/url is checked by the service."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    size: Optional[str] = None


class CreateCategoryRequest(BaseModel):
    """Body of `POST /api/admin/categories`."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: Optional[str] = None
    description: Optional[str] = None


class CategoryStat(CamelModel):
    name: Any = None
    file_count: int


class Stats(CamelModel):
    total_files: int
    total_categories: int
    total_downloads: int
    category_stats: List[CategoryStat]
    recent_files: List[Document]


class GetFilesResponse(CamelModel):
    """Response model for `GET /api/files`."""
    success: bool = True
    files: List[FileSummary]


class GetCategoriesResponse(CamelModel):
    """Response model for `GET /api/categories`. Categories are returned as stored."""
    success: bool = True
    categories: List[Any]


class AddFileResponse(CamelModel):
    success: bool = True
    message: str = "File added successfully"
    file: Document


class DeleteFileResponse(CamelModel):
    success: bool = True
    message: str = "File deleted successfully"
    deleted_file: Document


class AddCategoryResponse(CamelModel):
    success: bool = True
    message: str = "Category added successfully"
    category: Document


class DeleteCategoryResponse(CamelModel):
    success: bool = True
    message: str = "Category deleted successfully"
    deleted_category: Document


class StatsResponse(CamelModel):
    """Response model for `POST /api/admin/stats`."""
    success: bool = True
    stats: Stats
