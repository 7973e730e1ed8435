from __future__ import annotations

import logging
import time

from fastapi import HTTPException, status

from app.insights.engine import analyze_column
from app.insights.models import ColumnInsights
from app.schemas.analytics import ColumnInsightsRequest
from app.services.files import find_sheet, load_file

logger = logging.getLogger("sheet-insights")


def get_column_insights(payload: ColumnInsightsRequest) -> ColumnInsights:
    start = time.perf_counter()

    metadata = load_file(payload.file_id)
    sheet = find_sheet(payload.file_id, payload.sheet_name)
    if payload.column not in sheet.headers:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Column not found.")

    index = sheet.headers.index(payload.column)
    column = [row[index] if index < len(row) else None for row in sheet.data]
    insights = analyze_column(
        column,
        sheet_column_count=len(sheet.headers),
        source_label=metadata.original_name,
        column_name=payload.column,
    )

    logger.info(
        "insights file_id=%s sheet=%s column=%s data_type=%s elapsed_ms=%s",
        payload.file_id,
        payload.sheet_name,
        payload.column,
        insights.basic_insights.data_type,
        int((time.perf_counter() - start) * 1000),
    )
    return insights
