from fastapi import APIRouter, Depends

from download_server.db_layer import CategoryService
from download_server.dependencies import get_category_service
from download_server.schemas import GetCategoriesResponse
from download_server.utils.decorators import handle_route_errors

router = APIRouter()


@router.get("/categories", response_model=GetCategoriesResponse)
@handle_route_errors("Error fetching categories")
def get_categories(service: CategoryService = Depends(get_category_service)):
    """List every category as stored."""
    return GetCategoriesResponse(categories=service.list_categories())
