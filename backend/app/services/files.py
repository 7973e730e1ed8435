import csv
import json
import logging
import os
import shutil
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pandas as pd
from fastapi import HTTPException, UploadFile, status

from app.core.config import settings
from app.schemas.common import Pagination
from app.schemas.files import (
    FileDetail,
    FileListResponse,
    FileMetadata,
    FileStatsResponse,
    FileStatsTotals,
    FileUpdateRequest,
    RecentFile,
    SheetData,
    SheetSummary,
)

logger = logging.getLogger("sheet-insights")


def _files_dir() -> Path:
    files_dir = Path(settings.storage_dir) / "files"
    files_dir.mkdir(parents=True, exist_ok=True)
    return files_dir


def _validate_filename(filename: str) -> str:
    if not filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")
    if filename != os.path.basename(filename):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid filename.")
    if ".." in Path(filename).parts:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid filename.")
    suffix = Path(filename).suffix.lower()
    if suffix not in settings.allowed_extensions:
        allowed = ", ".join(settings.allowed_extensions)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only spreadsheet files ({allowed}) are allowed.",
        )
    return suffix


def _validate_file_id(file_id: str) -> None:
    try:
        uuid.UUID(file_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file_id.") from exc


def _save_upload_file(upload: UploadFile, dest_path: Path, max_bytes: int) -> int:
    total_bytes = 0
    with dest_path.open("wb") as buffer:
        while True:
            chunk = upload.file.read(1024 * 1024)
            if not chunk:
                break
            total_bytes += len(chunk)
            if total_bytes > max_bytes:
                raise HTTPException(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    detail="File too large.",
                )
            buffer.write(chunk)
    return total_bytes


def _detect_encoding(sample: bytes) -> tuple[str, list[str]]:
    warnings: list[str] = []
    try:
        sample.decode("utf-8")
        return "utf-8", warnings
    except UnicodeDecodeError:
        warnings.append("encoding fallback used: latin-1")
        return "latin-1", warnings


def _detect_delimiter(sample_text: str) -> tuple[str, list[str]]:
    warnings: list[str] = []
    try:
        dialect = csv.Sniffer().sniff(sample_text, delimiters=[",", ";", "\t"])
        return dialect.delimiter, warnings
    except csv.Error:
        warnings.append("delimiter detection failed, defaulting to ','")
        return ",", warnings


def _to_cell(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    if pd.isna(value):
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "item"):
        return value.item()
    return value


def _normalize_headers(raw_headers: list[Any]) -> tuple[list[str], list[str]]:
    warnings: list[str] = []
    cleaned: list[str] = []
    seen: dict[str, int] = {}
    duplicate_found = False
    for position, raw in enumerate(raw_headers, start=1):
        name = "" if raw is None else str(raw).strip()
        if not name:
            name = f"column_{position}"
            warnings.append(f"blank header renamed to {name}")
        count = seen.get(name, 0)
        if count:
            cleaned.append(f"{name}_dup{count}")
            duplicate_found = True
        else:
            cleaned.append(name)
        seen[name] = count + 1
    if duplicate_found:
        warnings.append("duplicate column names renamed")
    return cleaned, warnings


def _frame_to_sheet(name: str, frame: pd.DataFrame) -> tuple[SheetData | None, list[str]]:
    rows = [[_to_cell(value) for value in row] for row in frame.itertuples(index=False, name=None)]
    if not rows:
        return None, []
    headers, warnings = _normalize_headers(rows[0])
    data = rows[1:]
    sheet = SheetData(name=str(name), headers=headers, data=data, row_count=len(data))
    return sheet, [f"{name}: {warning}" for warning in warnings]


def _read_csv_frames(file_path: Path, sheet_name: str) -> tuple[dict[str, pd.DataFrame], str, str, list[str]]:
    with file_path.open("rb") as handle:
        sample = handle.read(65536)
    encoding, encoding_warnings = _detect_encoding(sample)
    delimiter, delimiter_warnings = _detect_delimiter(sample.decode(encoding))
    frame = pd.read_csv(
        file_path,
        sep=delimiter,
        encoding=encoding,
        header=None,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    return {sheet_name: frame}, encoding, delimiter, encoding_warnings + delimiter_warnings


def parse_workbook(file_path: Path, original_name: str) -> tuple[list[SheetData], dict[str, Any]]:
    """Parse every non-empty sheet; the first row of a sheet is its header."""
    suffix = file_path.suffix.lower()
    details: dict[str, Any] = {"encoding": None, "delimiter": None, "warnings": []}
    if suffix == ".csv":
        frames, encoding, delimiter, warnings = _read_csv_frames(file_path, Path(original_name).stem)
        details.update(encoding=encoding, delimiter=delimiter)
        details["warnings"].extend(warnings)
    else:
        frames = pd.read_excel(file_path, sheet_name=None, header=None, dtype=object)

    sheets: list[SheetData] = []
    for name, frame in frames.items():
        sheet, warnings = _frame_to_sheet(name, frame)
        if sheet is None:
            continue
        sheets.append(sheet)
        details["warnings"].extend(warnings)
    return sheets, details


def _file_dir(file_id: str) -> Path:
    _validate_file_id(file_id)
    return Path(settings.storage_dir) / "files" / file_id


def _write_metadata(metadata: FileMetadata) -> None:
    path = _file_dir(metadata.file_id) / "metadata.json"
    path.write_text(metadata.model_dump_json(indent=2), encoding="utf-8")


def _read_metadata(metadata_path: Path) -> FileMetadata:
    try:
        data = json.loads(metadata_path.read_text(encoding="utf-8"))
        return FileMetadata(**data)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found.") from exc
    except json.JSONDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Corrupted metadata.",
        ) from exc


def create_file(upload: UploadFile) -> FileMetadata:
    original_name = upload.filename or ""
    suffix = _validate_filename(original_name)
    files_dir = _files_dir()

    file_id = str(uuid.uuid4())
    file_dir = files_dir / file_id
    file_dir.mkdir(parents=True, exist_ok=False)

    filename = f"source{suffix}"
    file_path = file_dir / filename
    max_bytes = settings.max_upload_mb * 1024 * 1024

    try:
        file_size = _save_upload_file(upload, file_path, max_bytes)
        sheets, details = parse_workbook(file_path, original_name)
        if not sheets:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Workbook contains no data.")

        metadata = FileMetadata(
            file_id=file_id,
            filename=filename,
            original_name=original_name,
            file_size_bytes=file_size,
            upload_date=datetime.now(timezone.utc).isoformat(),
            sheets=[SheetSummary(name=s.name, headers=s.headers, row_count=s.row_count) for s in sheets],
            encoding=details["encoding"],
            delimiter=details["delimiter"],
            warnings=details["warnings"],
        )
        (file_dir / "sheets.json").write_text(
            json.dumps([sheet.model_dump() for sheet in sheets]),
            encoding="utf-8",
        )
        _write_metadata(metadata)
        logger.info(
            "file uploaded file_id=%s name=%s size=%s sheets=%s",
            file_id,
            original_name,
            file_size,
            len(sheets),
        )
        return metadata
    except HTTPException:
        shutil.rmtree(file_dir, ignore_errors=True)
        raise
    except Exception as exc:
        shutil.rmtree(file_dir, ignore_errors=True)
        logger.warning("file upload failed name=%s error=%s", original_name, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to process spreadsheet: {exc}",
        ) from exc


def load_file(file_id: str) -> FileMetadata:
    return _read_metadata(_file_dir(file_id) / "metadata.json")


def load_sheets(file_id: str) -> list[SheetData]:
    sheets_path = _file_dir(file_id) / "sheets.json"
    try:
        data = json.loads(sheets_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found.") from exc
    return [SheetData(**item) for item in data]


def find_sheet(file_id: str, sheet_name: str) -> SheetData:
    for sheet in load_sheets(file_id):
        if sheet.name == sheet_name:
            return sheet
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sheet not found.")


def get_file_detail(file_id: str) -> FileDetail:
    metadata = load_file(file_id)
    return FileDetail(**{**metadata.model_dump(), "sheets": load_sheets(file_id)})


def _all_files() -> list[FileMetadata]:
    results: list[FileMetadata] = []
    for file_dir in _files_dir().iterdir():
        metadata_path = file_dir / "metadata.json"
        if not file_dir.is_dir() or not metadata_path.exists():
            continue
        results.append(_read_metadata(metadata_path))
    results.sort(key=lambda item: item.upload_date, reverse=True)
    return results


def list_files(page: int, limit: int) -> FileListResponse:
    files = _all_files()
    start = (page - 1) * limit
    return FileListResponse(
        files=files[start : start + limit],
        pagination=Pagination.build(len(files), page, limit),
    )


def update_file(file_id: str, payload: FileUpdateRequest) -> FileMetadata:
    metadata = load_file(file_id)
    changes = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    updated = metadata.model_copy(update=changes)
    _write_metadata(updated)
    return updated


def delete_file(file_id: str) -> None:
    metadata = load_file(file_id)
    shutil.rmtree(_file_dir(file_id), ignore_errors=True)
    logger.info("file deleted file_id=%s name=%s", file_id, metadata.original_name)


def mark_analyzed(file_id: str) -> None:
    metadata = load_file(file_id)
    updated = metadata.model_copy(
        update={
            "analysis_count": metadata.analysis_count + 1,
            "last_analyzed": datetime.now(timezone.utc).isoformat(),
        }
    )
    _write_metadata(updated)


def file_stats() -> FileStatsResponse:
    files = _all_files()
    if files:
        total_size = sum(item.file_size_bytes for item in files)
        totals = FileStatsTotals(
            total_files=len(files),
            total_size=total_size,
            total_analyses=sum(item.analysis_count for item in files),
            avg_file_size=total_size / len(files),
        )
    else:
        totals = FileStatsTotals()
    recent = [
        RecentFile(
            file_id=item.file_id,
            original_name=item.original_name,
            upload_date=item.upload_date,
            file_size_bytes=item.file_size_bytes,
        )
        for item in files[: settings.recent_items]
    ]
    return FileStatsResponse(stats=totals, recent_files=recent)
