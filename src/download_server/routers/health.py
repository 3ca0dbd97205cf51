from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter()

ENDPOINT_DESCRIPTIONS = {
    "GET /api/files": "Get all available files",
    "GET /api/categories": "Get all categories",
    "POST /api/admin/files": "Add new file (admin)",
    "DELETE /api/admin/files/:id": "Delete file (admin)",
    "POST /api/admin/categories": "Add category (admin)",
    "DELETE /api/admin/categories/:id": "Delete category (admin)",
    "POST /api/admin/stats": "Get statistics (admin)",
    "GET /api/download/:id": "Download file by ID",
}

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /api/files",
    "GET /api/categories",
    "GET /api/download/:id",
    "POST /api/admin/files",
    "DELETE /api/admin/files/:id",
    "POST /api/admin/categories",
    "DELETE /api/admin/categories/:id",
    "POST /api/admin/stats",
]


@router.get("/")
async def health_check():
    """
    Health check endpoint; also lists the available endpoints.

    Does not touch the document store, so it stays green when GitHub is down.
    """
    return {
        "message": "file-download-server is running",
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": ENDPOINT_DESCRIPTIONS,
    }
