import logging
from textwrap import dedent
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from download_server import __version__
from download_server.adapters.document_store import DocumentStore, DocumentStoreFactory
from download_server.auth import CredentialVerifier, SharedSecretVerifier
from download_server.errors import (
    ApiError,
    handle_api_errors,
    handle_broad_exceptions,
    handle_http_errors,
    handle_request_validation_errors,
)
from download_server.routers.admin import router as admin_router
from download_server.routers.categories import router as categories_router
from download_server.routers.files import router as files_router
from download_server.routers.health import router as health_router
from download_server.settings import Settings, configure_logging, get_settings

# Set up logging
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    document_store: Optional[DocumentStore] = None,
    credential_verifier: Optional[CredentialVerifier] = None,
) -> FastAPI:
    """Create a FastAPI application.

    Args:
        settings: Application settings (read from the environment if None)
        document_store: Store for the files/categories collections
            (built from the settings if None)
        credential_verifier: Admin credential check (shared secret from the
            settings if None)
    """
    settings = settings or get_settings()
    document_store = document_store or DocumentStoreFactory.get_store(settings)
    credential_verifier = credential_verifier or SharedSecretVerifier(settings.admin_secret)

    if settings.uses_default_admin_secret:
        logger.warning("ADMIN_SECRET is not set; using the default admin secret")

    app = FastAPI(
        title="File Download Server",
        summary="Serve downloadable files catalogued in a GitHub repository",
        version=__version__,
        description=dedent(
            """\
        File and category metadata live in JSON documents committed to a GitHub
        repository. Public routes list and download files; `/api/admin/*` routes
        need the admin secret as `Authorization: Bearer <secret>` or a `secret`
        field in the JSON or form body.
        """
        ),
        docs_url="/docs",  # "/" is the health check
        generate_unique_id_function=custom_generate_unique_id,
    )

    # registered first so CORS wraps it and its 500s carry CORS headers
    app.middleware("http")(handle_broad_exceptions)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.document_store = document_store
    app.state.credential_verifier = credential_verifier

    app.include_router(health_router, tags=["health"])
    app.include_router(files_router, prefix="/api", tags=["files"])
    app.include_router(categories_router, prefix="/api", tags=["categories"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])

    app.add_exception_handler(ApiError, handle_api_errors)
    app.add_exception_handler(RequestValidationError, handle_request_validation_errors)
    app.add_exception_handler(StarletteHTTPException, handle_http_errors)

    logger.info(f"App created with {settings.storage_backend} storage ({type(document_store).__name__})")
    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
