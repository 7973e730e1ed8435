from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ColumnKind(str, Enum):
    NUMERIC = "numeric"
    TEXT = "text"
    MIXED = "mixed"
    EMPTY = "empty"


@dataclass
class ValuePartition:
    numeric: list[float] = field(default_factory=list)
    text: list[str] = field(default_factory=list)
    empty_values: int = 0

    @property
    def total_values(self) -> int:
        return len(self.numeric) + len(self.text)

    @property
    def total_rows(self) -> int:
        return self.total_values + self.empty_values

    @property
    def kind(self) -> ColumnKind:
        if self.numeric and self.text:
            return ColumnKind.MIXED
        if self.numeric:
            return ColumnKind.NUMERIC
        if self.text:
            return ColumnKind.TEXT
        return ColumnKind.EMPTY


@dataclass(frozen=True)
class NumericSummary:
    count: int
    sum: float
    mean: float
    median: float
    min: float
    max: float
    range: float
    variance: float
    standard_deviation: float
    q1: float
    q3: float
    iqr: float
    coefficient_of_variation: float | None


@dataclass(frozen=True)
class TextSummary:
    count: int
    unique_count: int
    most_common: list[tuple[str, int]]
    diversity: float


@dataclass
class InsightSections:
    key_findings: list[str] = field(default_factory=list)
    business_insights: list[str] = field(default_factory=list)
    data_quality_issues: list[str] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)

    def extend(self, other: InsightSections) -> None:
        self.key_findings.extend(other.key_findings)
        self.business_insights.extend(other.business_insights)
        self.data_quality_issues.extend(other.data_quality_issues)
        self.next_steps.extend(other.next_steps)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BasicInsights(CamelModel):
    column: str
    total_values: int
    empty_values: int
    data_type: str | None = None
    numeric_values: int | None = None
    sum: str | None = None
    mean: str | None = None
    median: str | None = None
    min: int | float | None = None
    max: int | float | None = None
    range: str | None = None
    standard_deviation: str | None = None
    variance: str | None = None
    q1: str | None = None
    q3: str | None = None
    iqr: str | None = None
    coefficient_of_variation: str | None = None
    text_values: int | None = None
    unique_text_values: int | None = None
    most_common_values: list[tuple[str, int]] | None = None
    diversity: str | None = None


class StructuredInsights(CamelModel):
    key_findings: list[str] = Field(default_factory=list)
    business_insights: list[str] = Field(default_factory=list)
    data_quality_issues: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)


class AiInsights(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    raw_insight: str
    structured_insights: StructuredInsights
    generated_at: str
    model: str
    source: str
    confidence: str
    analysis_depth: str


class ColumnInsights(CamelModel):
    basic_insights: BasicInsights
    ai_insights: AiInsights


class ChartConfig(BaseModel):
    title: str | None = None
    background_color: str | None = None
    border_color: str | None = None
    border_width: float | None = None


class ChartSummary(BaseModel):
    total_data_points: int
    x_axis: str
    y_axis: str
    chart_type: str
    valid_data_points: int
    invalid_data_points: int


class ChartData(BaseModel):
    labels: list[Any] | None = None
    datasets: list[dict[str, Any]]
