"""Error types and the handlers that turn them into JSON responses."""
import logging
from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised at startup when the settings cannot produce a working service."""


class ApiError(Exception):
    """Base class for errors that map onto a `{success: false, ...}` response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class ValidationError(ApiError):
    """A required field is missing or a uniqueness rule is broken."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ApiError):
    """No record with the requested id."""

    status_code = status.HTTP_404_NOT_FOUND


class AuthorizationError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED


class UpstreamError(ApiError):
    """The remote document store could not be reached or refused the request."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class RevisionConflictError(UpstreamError):
    """The document changed since it was read; the write was rejected."""


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_api_errors(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.error})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported as a 400 rather than FastAPI's 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Invalid request body", "error": str(exc.errors())},
    )


async def handle_http_errors(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown paths and unsupported methods both answer with the endpoint directory."""
    # imported here to avoid a cycle with the routers package
    from download_server.routers.health import AVAILABLE_ENDPOINTS

    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "success": False,
                "message": "Endpoint not found",
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Last line of defence: anything unhandled becomes a 500 JSON body."""
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception(f"Server error on {request.method} {request.url.path}")
        settings = request.app.state.settings
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Internal server error",
                "error": str(e) if settings.environment == "development" else "Something went wrong",
            },
        )
