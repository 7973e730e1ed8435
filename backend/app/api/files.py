from fastapi import APIRouter, File, Query, UploadFile, status

from app.core.config import settings
from app.schemas.common import MessageResponse
from app.schemas.files import (
    FileDetail,
    FileListResponse,
    FileStatsResponse,
    FileUpdateRequest,
    FileUpdateResponse,
    FileUploadResponse,
)
from app.services.files import (
    create_file,
    delete_file,
    file_stats,
    get_file_detail,
    list_files,
    update_file,
)

router = APIRouter(prefix="/files", tags=["files"])


@router.post("/upload", response_model=FileUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_file(file: UploadFile = File(...)) -> FileUploadResponse:
    metadata = create_file(file)
    return FileUploadResponse(message="File uploaded and processed successfully", file=metadata)


@router.get("", response_model=FileListResponse)
def list_all_files(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
) -> FileListResponse:
    return list_files(page, limit or settings.files_page_size)


@router.get("/stats", response_model=FileStatsResponse)
def get_file_stats() -> FileStatsResponse:
    return file_stats()


@router.get("/{file_id}", response_model=FileDetail)
def get_file(file_id: str) -> FileDetail:
    return get_file_detail(file_id)


@router.put("/{file_id}", response_model=FileUpdateResponse)
def update_file_metadata(file_id: str, payload: FileUpdateRequest) -> FileUpdateResponse:
    metadata = update_file(file_id, payload)
    return FileUpdateResponse(message="File updated successfully", file=metadata)


@router.delete("/{file_id}", response_model=MessageResponse)
def delete_file_endpoint(file_id: str) -> MessageResponse:
    delete_file(file_id)
    return MessageResponse(message="File deleted successfully")
