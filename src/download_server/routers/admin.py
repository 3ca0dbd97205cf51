from fastapi import APIRouter, Depends, Path

from download_server.auth import require_admin
from download_server.db_layer import CategoryService, FileService, StatsService
from download_server.dependencies import (
    get_category_service,
    get_create_category_request,
    get_create_file_request,
    get_file_service,
    get_stats_service,
)
from download_server.schemas import (
    AddCategoryResponse,
    AddFileResponse,
    CreateCategoryRequest,
    CreateFileRequest,
    DeleteCategoryResponse,
    DeleteFileResponse,
    StatsResponse,
)
from download_server.utils.decorators import handle_route_errors

# Every route here requires the admin secret
router = APIRouter(dependencies=[Depends(require_admin)])

@router.post("/files", response_model=AddFileResponse)
@handle_route_errors("Error adding file")
def add_file(
    payload: CreateFileRequest = Depends(get_create_file_request),
    service: FileService = Depends(get_file_service),
):
    """
    Add a file record.

    Args:
        payload: JSON or form body; name and url are required; category,
            description and size default to "Uncategorized", "" and "Unknown"

    Returns:
        AddFileResponse: The created record, including its generated id
    """
    record = service.add_file(
        name=payload.name,
        url=payload.url,
        category=payload.category,
        description=payload.description,
        size=payload.size,
    )
    return AddFileResponse(file=record.to_document())

@router.delete("/files/{file_id}", response_model=DeleteFileResponse)
@handle_route_errors("Error deleting file")
def delete_file(
    file_id: str = Path(..., description="ID of the file to delete"),
    service: FileService = Depends(get_file_service),
):
    return DeleteFileResponse(deleted_file=service.delete_file(file_id).to_document())

@router.post("/categories", response_model=AddCategoryResponse)
@handle_route_errors("Error adding category")
def add_category(
    payload: CreateCategoryRequest = Depends(get_create_category_request),
    service: CategoryService = Depends(get_category_service),
):
    """Add a category; names must be unique ignoring case."""
    category = service.add_category(name=payload.name, description=payload.description)
    return AddCategoryResponse(category=category.to_document())

@router.delete("/categories/{category_id}", response_model=DeleteCategoryResponse)
@handle_route_errors("Error deleting category")
def delete_category(
    category_id: str = Path(..., description="ID of the category to delete"),
    service: CategoryService = Depends(get_category_service),
):
    deleted = service.delete_category(category_id)
    return DeleteCategoryResponse(deleted_category=deleted.to_document())

@router.post("/stats", response_model=StatsResponse)
@handle_route_errors("Error fetching stats")
def get_stats(service: StatsService = Depends(get_stats_service)):
    """Totals, per-category counts and the five most recent uploads."""
    return StatsResponse(stats=service.get_stats())
