import json
from typing import Any, Dict

from fastapi import Depends, Request
from pydantic import ValidationError as PydanticValidationError

from download_server.adapters.document_store import DocumentStore
from download_server.db_layer import CategoryService, FileService, StatsService
from download_server.errors import ValidationError
from download_server.schemas import CreateCategoryRequest, CreateFileRequest

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_document_store(request: Request) -> DocumentStore:
    """Document store dependency."""
    return request.app.state.document_store


def get_file_service(request: Request) -> FileService:
    return FileService(get_document_store(request))


def get_category_service(request: Request) -> CategoryService:
    return CategoryService(get_document_store(request))


def get_stats_service(request: Request) -> StatsService:
    return StatsService(get_document_store(request))


async def get_request_payload(request: Request) -> Dict[str, Any]:
    """Request body as a dict, from a JSON or an HTML form body.

    An empty body, or a JSON body that is not an object, gives an empty dict.
    FastAPI caches the result per request, so the auth gate and the route
    share one parse.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return dict(form)

    body = await request.body()
    if not body.strip():
        return {}
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise ValidationError("Invalid request body", error=str(e)) from e
    return payload if isinstance(payload, dict) else {}


def get_create_file_request(payload: Dict[str, Any] = Depends(get_request_payload)) -> CreateFileRequest:
    try:
        return CreateFileRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError("Invalid request body", error=str(e)) from e


def get_create_category_request(
    payload: Dict[str, Any] = Depends(get_request_payload),
) -> CreateCategoryRequest:
    try:
        return CreateCategoryRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError("Invalid request body", error=str(e)) from e
