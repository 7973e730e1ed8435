import json
import logging
import uuid
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path

from fastapi import HTTPException, status

from app.core.config import settings
from app.insights.models import ChartConfig
from app.schemas.analytics import (
    AnalysisEntry,
    AnalysisHistoryResponse,
    AnalysisRecord,
    ChartTypeCount,
    DashboardStatsResponse,
)
from app.schemas.common import Pagination
from app.services.files import load_file

logger = logging.getLogger("sheet-insights")


def _analyses_dir() -> Path:
    analyses_dir = Path(settings.storage_dir) / "analyses"
    analyses_dir.mkdir(parents=True, exist_ok=True)
    return analyses_dir


def _analysis_path(analysis_id: str) -> Path:
    try:
        uuid.UUID(analysis_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid analysis_id.") from exc
    return _analyses_dir() / f"{analysis_id}.json"


def save_analysis(
    file_id: str,
    sheet_name: str,
    chart_type: str,
    x_axis: str,
    y_axis: str,
    chart_config: ChartConfig | None,
) -> AnalysisRecord:
    record = AnalysisRecord(
        analysis_id=str(uuid.uuid4()),
        file_id=file_id,
        sheet_name=sheet_name,
        chart_type=chart_type,
        x_axis=x_axis,
        y_axis=y_axis,
        chart_config=chart_config or ChartConfig(),
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    _analysis_path(record.analysis_id).write_text(record.model_dump_json(indent=2), encoding="utf-8")
    return record


def _all_analyses() -> list[AnalysisRecord]:
    records = [
        AnalysisRecord(**json.loads(path.read_text(encoding="utf-8")))
        for path in _analyses_dir().glob("*.json")
    ]
    records.sort(key=lambda item: item.created_at, reverse=True)
    return records


def _with_file_name(record: AnalysisRecord) -> AnalysisEntry:
    try:
        file_name = load_file(record.file_id).original_name
    except HTTPException:
        file_name = None
    return AnalysisEntry(**record.model_dump(), file_name=file_name)


def analysis_history(page: int, limit: int) -> AnalysisHistoryResponse:
    records = _all_analyses()
    start = (page - 1) * limit
    return AnalysisHistoryResponse(
        analyses=[_with_file_name(record) for record in records[start : start + limit]],
        pagination=Pagination.build(len(records), page, limit),
    )


def delete_analysis(analysis_id: str) -> None:
    path = _analysis_path(analysis_id)
    try:
        path.unlink()
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Analysis not found.") from exc
    logger.info("analysis deleted analysis_id=%s", analysis_id)


def dashboard_stats() -> DashboardStatsResponse:
    records = _all_analyses()
    breakdown = Counter(record.chart_type for record in records)
    return DashboardStatsResponse(
        total_analyses=len(records),
        chart_type_breakdown=[
            ChartTypeCount(chart_type=chart_type, count=count)
            for chart_type, count in breakdown.most_common()
        ],
        recent_analyses=[_with_file_name(record) for record in records[: settings.recent_items]],
    )
