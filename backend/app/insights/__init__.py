from app.insights.charts import CHART_TYPES, build_chart_data, build_points
from app.insights.classifier import classify_values, is_missing, parse_number
from app.insights.engine import analyze_column
from app.insights.models import (
    AiInsights,
    BasicInsights,
    ChartConfig,
    ChartData,
    ChartSummary,
    ColumnInsights,
    ColumnKind,
    InsightSections,
    NumericSummary,
    StructuredInsights,
    TextSummary,
    ValuePartition,
)
from app.insights.narrator import narrate
from app.insights.similarity import find_similar_categories, levenshtein_distance, similarity
from app.insights.statistics import (
    build_basic_insights,
    completeness,
    summarize_numeric,
    summarize_text,
)

__all__ = [
    "AiInsights",
    "BasicInsights",
    "CHART_TYPES",
    "ChartConfig",
    "ChartData",
    "ChartSummary",
    "ColumnInsights",
    "ColumnKind",
    "InsightSections",
    "NumericSummary",
    "StructuredInsights",
    "TextSummary",
    "ValuePartition",
    "analyze_column",
    "build_basic_insights",
    "build_chart_data",
    "build_points",
    "classify_values",
    "completeness",
    "find_similar_categories",
    "is_missing",
    "levenshtein_distance",
    "narrate",
    "parse_number",
    "similarity",
    "summarize_numeric",
    "summarize_text",
]
