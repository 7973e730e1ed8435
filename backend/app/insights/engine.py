from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from app.core.config import ENGINE_LABELS, settings
from app.insights.classifier import classify_values
from app.insights.models import AiInsights, ColumnInsights
from app.insights.narrator import narrate
from app.insights.statistics import (
    build_basic_insights,
    completeness,
    summarize_numeric,
    summarize_text,
)

logger = logging.getLogger("sheet-insights")


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def raw_insight_text(source_label: str) -> str:
    return (
        f"Professional data analysis completed for {source_label}. "
        "This analysis uses advanced statistical methods and business intelligence "
        "principles to provide actionable insights without requiring external AI services."
    )


def analyze_column(
    column: Iterable[Any],
    sheet_column_count: int,
    source_label: str,
    column_name: str = "",
) -> ColumnInsights:
    partition = classify_values(column)
    numeric = summarize_numeric(partition.numeric)
    text = summarize_text(partition.text, top_n=settings.insights_top_values)
    structured = narrate(
        partition,
        numeric,
        text,
        completeness(partition),
        sheet_column_count,
    )
    logger.debug(
        "column insights column=%s kind=%s total=%s empty=%s",
        column_name,
        partition.kind.value,
        partition.total_values,
        partition.empty_values,
    )
    return ColumnInsights(
        basic_insights=build_basic_insights(column_name, partition, numeric, text),
        ai_insights=AiInsights(
            raw_insight=raw_insight_text(source_label),
            structured_insights=structured,
            generated_at=_utc_timestamp(),
            model=ENGINE_LABELS.model,
            source=ENGINE_LABELS.source,
            confidence=ENGINE_LABELS.confidence,
            analysis_depth=ENGINE_LABELS.analysis_depth,
        ),
    )
