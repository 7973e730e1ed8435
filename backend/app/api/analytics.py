from fastapi import APIRouter, Query

from app.core.config import settings
from app.insights.models import ColumnInsights
from app.schemas.analytics import (
    AnalysisHistoryResponse,
    ChartDataRequest,
    ChartDataResponse,
    ColumnInsightsRequest,
    DashboardStatsResponse,
)
from app.schemas.common import MessageResponse
from app.services.analyses import analysis_history, dashboard_stats, delete_analysis
from app.services.charts_service import generate_chart_data
from app.services.insights_service import get_column_insights

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/chart-data", response_model=ChartDataResponse)
def chart_data_endpoint(payload: ChartDataRequest) -> ChartDataResponse:
    return generate_chart_data(payload)


@router.get("/history", response_model=AnalysisHistoryResponse)
def history_endpoint(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
) -> AnalysisHistoryResponse:
    return analysis_history(page, limit or settings.history_page_size)


@router.post("/insights", response_model=ColumnInsights)
def insights_endpoint(payload: ColumnInsightsRequest) -> ColumnInsights:
    return get_column_insights(payload)


@router.get("/dashboard-stats", response_model=DashboardStatsResponse)
def dashboard_stats_endpoint() -> DashboardStatsResponse:
    return dashboard_stats()


@router.delete("/{analysis_id}", response_model=MessageResponse)
def delete_analysis_endpoint(analysis_id: str) -> MessageResponse:
    delete_analysis(analysis_id)
    return MessageResponse(message="Analysis deleted successfully")
