from typing import Any

from pydantic import BaseModel, Field

from app.schemas.common import Pagination


class SheetSummary(BaseModel):
    name: str
    headers: list[str]
    row_count: int


class SheetData(SheetSummary):
    data: list[list[Any]]


class FileMetadata(BaseModel):
    file_id: str
    filename: str
    original_name: str
    file_size_bytes: int
    upload_date: str
    last_analyzed: str | None = None
    analysis_count: int = 0
    description: str | None = None
    sheets: list[SheetSummary]
    encoding: str | None = None
    delimiter: str | None = None
    warnings: list[str] = Field(default_factory=list)


class FileDetail(FileMetadata):
    sheets: list[SheetData]


class FileUploadResponse(BaseModel):
    message: str
    file: FileMetadata


class FileListResponse(BaseModel):
    files: list[FileMetadata]
    pagination: Pagination


class FileUpdateRequest(BaseModel):
    original_name: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, max_length=500)


class FileUpdateResponse(BaseModel):
    message: str
    file: FileMetadata


class FileStatsTotals(BaseModel):
    total_files: int = 0
    total_size: int = 0
    total_analyses: int = 0
    avg_file_size: float = 0.0


class RecentFile(BaseModel):
    file_id: str
    original_name: str
    upload_date: str
    file_size_bytes: int


class FileStatsResponse(BaseModel):
    stats: FileStatsTotals
    recent_files: list[RecentFile]
