from typing import Literal

from pydantic import BaseModel, Field

from app.insights.models import ChartConfig, ChartData, ChartSummary
from app.schemas.common import Pagination

ChartType = Literal["bar", "line", "pie", "scatter", "column3d"]


class ChartDataRequest(BaseModel):
    file_id: str
    sheet_name: str = Field(min_length=1)
    x_axis: str = Field(min_length=1)
    y_axis: str = Field(min_length=1)
    chart_type: ChartType
    chart_config: ChartConfig | None = None


class ChartDataResponse(BaseModel):
    chart_data: ChartData
    analysis_id: str
    summary: ChartSummary


class AnalysisRecord(BaseModel):
    analysis_id: str
    file_id: str
    sheet_name: str
    chart_type: ChartType
    x_axis: str
    y_axis: str
    chart_config: ChartConfig = Field(default_factory=ChartConfig)
    created_at: str


class AnalysisEntry(AnalysisRecord):
    file_name: str | None = None


class AnalysisHistoryResponse(BaseModel):
    analyses: list[AnalysisEntry]
    pagination: Pagination


class ColumnInsightsRequest(BaseModel):
    file_id: str
    sheet_name: str
    column: str


class ChartTypeCount(BaseModel):
    chart_type: str
    count: int


class DashboardStatsResponse(BaseModel):
    total_analyses: int
    chart_type_breakdown: list[ChartTypeCount]
    recent_analyses: list[AnalysisEntry]
