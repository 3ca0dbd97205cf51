from fastapi import APIRouter, Depends, Path
from fastapi.responses import RedirectResponse
from starlette import status

from download_server.db_layer import FileService
from download_server.dependencies import get_file_service
from download_server.schemas import GetFilesResponse
from download_server.utils.decorators import handle_route_errors

router = APIRouter()

@router.get("/files", response_model=GetFilesResponse)
@handle_route_errors("Error fetching files")
def get_files(service: FileService = Depends(get_file_service)):
    """
    List every file with its public metadata.

    Returns:
        GetFilesResponse: Files in stored order; the download url is omitted
    """
    return GetFilesResponse(files=service.list_summaries())

@router.get("/download/{file_id}", status_code=status.HTTP_302_FOUND)
@handle_route_errors("Error downloading file")
def download_file(
    file_id: str = Path(..., description="ID of the file to download"),
    service: FileService = Depends(get_file_service),
):
    """
    Count a download and redirect to the stored url.

    The counter is persisted before the redirect is sent; if that write fails
    the client gets a 500 and no redirect.
    """
    record = service.record_download(file_id)
    return RedirectResponse(url=record.url, status_code=status.HTTP_302_FOUND)
