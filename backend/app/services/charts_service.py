from __future__ import annotations

import logging

from fastapi import HTTPException, status

from app.insights.charts import build_chart_data, build_points
from app.insights.models import ChartSummary
from app.schemas.analytics import ChartDataRequest, ChartDataResponse
from app.services.analyses import save_analysis
from app.services.files import find_sheet, load_file, mark_analyzed

logger = logging.getLogger("sheet-insights")


def generate_chart_data(payload: ChartDataRequest) -> ChartDataResponse:
    load_file(payload.file_id)
    sheet = find_sheet(payload.file_id, payload.sheet_name)
    if payload.x_axis not in sheet.headers or payload.y_axis not in sheet.headers:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid axis selection.")

    points = build_points(
        sheet.data,
        sheet.headers.index(payload.x_axis),
        sheet.headers.index(payload.y_axis),
    )
    chart_data = build_chart_data(points, payload.x_axis, payload.y_axis, payload.chart_type)

    record = save_analysis(
        file_id=payload.file_id,
        sheet_name=payload.sheet_name,
        chart_type=payload.chart_type,
        x_axis=payload.x_axis,
        y_axis=payload.y_axis,
        chart_config=payload.chart_config,
    )
    mark_analyzed(payload.file_id)
    logger.info(
        "chart generated file_id=%s sheet=%s type=%s points=%s",
        payload.file_id,
        payload.sheet_name,
        payload.chart_type,
        len(points),
    )

    return ChartDataResponse(
        chart_data=chart_data,
        analysis_id=record.analysis_id,
        summary=ChartSummary(
            total_data_points=len(points),
            x_axis=payload.x_axis,
            y_axis=payload.y_axis,
            chart_type=payload.chart_type,
            valid_data_points=len(points),
            invalid_data_points=sheet.row_count - len(points),
        ),
    )
