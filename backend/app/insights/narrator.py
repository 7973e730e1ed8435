"""Rule-based narration of column summaries.

Each column kind is narrated by one pure function producing four ordered
lists (key findings, business insights, data quality issues, next steps).
Size and cross-column rules are appended afterwards for every kind.
"""

from __future__ import annotations

import math

from app.core.config import settings
from app.insights.models import (
    ColumnKind,
    InsightSections,
    NumericSummary,
    StructuredInsights,
    TextSummary,
    ValuePartition,
)
from app.insights.similarity import find_similar_categories
from app.insights.statistics import to_fixed


def skewness_label(mean: float, median: float) -> str:
    if math.isclose(mean, median, rel_tol=1e-9, abs_tol=1e-12):
        return "symmetric"
    return "right-skewed" if mean > median else "left-skewed"


def variability_label(cv: float | None) -> str:
    if cv is None:
        return "Undetermined"
    if cv < 15:
        return "Low"
    if cv < 35:
        return "Moderate"
    return "High"


def diversity_label(diversity: float) -> str:
    if diversity > 0.7:
        return "High"
    if diversity > 0.3:
        return "Moderate"
    return "Low"


def outlier_bounds(summary: NumericSummary) -> tuple[float, float]:
    factor = settings.insights_outlier_factor
    return summary.q1 - factor * summary.iqr, summary.q3 + factor * summary.iqr


def has_outliers(summary: NumericSummary) -> bool:
    lower, upper = outlier_bounds(summary)
    return summary.min < lower or summary.max > upper


def _numeric_sections(
    summary: NumericSummary,
    completeness: float,
    empty_values: int,
) -> InsightSections:
    sections = InsightSections()
    cv = summary.coefficient_of_variation
    skewness = skewness_label(summary.mean, summary.median)
    cv_text = f"{to_fixed(cv)}%" if cv is not None else "n/a, mean is zero"

    sections.key_findings.extend(
        [
            f"Dataset contains {summary.count} numeric values with average {to_fixed(summary.mean)}",
            f"Data distribution is {skewness} (mean: {to_fixed(summary.mean)}, median: {to_fixed(summary.median)})",
            f"Variability: {variability_label(cv)} (CV: {cv_text})",
            f"Middle 50% of data ranges from {to_fixed(summary.q1)} to {to_fixed(summary.q3)} (IQR: {to_fixed(summary.iqr)})",
        ]
    )

    if cv is not None and cv < 15:
        sections.business_insights.extend(
            [
                "Low variability suggests consistent performance - good for predictable planning",
                "Consider this as a stable baseline for forecasting and budgeting",
            ]
        )
    elif cv is not None and cv > 50:
        sections.business_insights.extend(
            [
                "High variability indicates significant fluctuations - investigate underlying causes",
                "Consider segmentation analysis to identify different performance groups",
                "Risk management strategies may be needed due to high volatility",
            ]
        )

    if skewness == "right-skewed":
        sections.business_insights.append(
            "Most values are below average with some high outliers"
        )
    elif skewness == "left-skewed":
        sections.business_insights.append(
            "Most values are above average with some low outliers"
        )
    if skewness != "symmetric":
        sections.business_insights.append(
            "Consider using median instead of mean for more representative central tendency"
        )

    if completeness < settings.insights_completeness_threshold:
        sections.data_quality_issues.append(
            f"Data completeness is {to_fixed(completeness, 1)}% - {empty_values} missing values detected"
        )
    if has_outliers(summary):
        sections.data_quality_issues.append(
            "Potential outliers detected - review extreme values for accuracy"
        )

    sections.next_steps.extend(
        [
            "Create histogram to visualize data distribution",
            "Perform correlation analysis with other numeric columns",
            "Consider time-series analysis if temporal data is available",
        ]
    )
    if cv is not None and cv > 35:
        sections.next_steps.extend(
            [
                "Investigate factors causing high variability",
                "Consider data segmentation analysis",
            ]
        )
    return sections


def _text_sections(
    summary: TextSummary,
    completeness: float,
    empty_values: int,
) -> InsightSections:
    sections = InsightSections()
    diversity = summary.diversity

    sections.key_findings.extend(
        [
            f"Dataset contains {summary.unique_count} unique categories from {summary.count} total values",
            f"Data diversity index: {diversity:g} ({diversity_label(diversity)} diversity)",
        ]
    )
    if summary.most_common:
        label, count = summary.most_common[0]
        share = count / summary.count * 100
        sections.key_findings.append(f'Most frequent category: "{label}" ({to_fixed(share, 1)}% of data)')

    if diversity < 0.3:
        sections.business_insights.extend(
            [
                "Low diversity suggests data is concentrated in few categories",
                "Consider consolidating or standardizing category names",
                "Focus analysis on top categories for maximum impact",
            ]
        )
    elif diversity > 0.7:
        sections.business_insights.extend(
            [
                "High diversity indicates many different categories",
                "Consider grouping similar categories for better analysis",
                "May benefit from hierarchical categorization",
            ]
        )

    if completeness < settings.insights_completeness_threshold:
        sections.data_quality_issues.append(
            f"{empty_values} missing values ({to_fixed(100 - completeness, 1)}% of data)"
        )
    similar = find_similar_categories(
        [label for label, _ in summary.most_common],
        threshold=settings.insights_similarity_threshold,
    )
    if similar:
        sections.data_quality_issues.append(
            "Potential duplicate categories with slight variations detected - consider data standardization"
        )

    sections.next_steps.extend(
        [
            "Create frequency distribution chart",
            "Analyze category patterns for grouping opportunities",
            "Consider text standardization and cleanup",
        ]
    )
    if diversity > 0.5:
        sections.next_steps.extend(
            [
                "Explore hierarchical categorization",
                "Consider creating category groups",
            ]
        )
    return sections


def _mixed_sections(numeric_count: int, text_count: int) -> InsightSections:
    return InsightSections(
        key_findings=[
            f"Mixed data type: {numeric_count} numeric and {text_count} text values",
            "Data inconsistency detected - may need cleaning or type conversion",
        ],
        data_quality_issues=[
            "Mixed data types in single column indicate potential data quality issues",
            "Consider separating numeric and text data or standardizing format",
        ],
        next_steps=[
            "Analyze data entry patterns to identify root cause",
            "Consider data type conversion or column splitting",
            "Implement data validation rules for future entries",
        ],
    )


def _global_sections(total_values: int, sheet_column_count: int) -> InsightSections:
    sections = InsightSections()
    if total_values < settings.insights_small_sample:
        sections.data_quality_issues.append(
            "Small sample size - results may not be statistically significant"
        )
        sections.next_steps.append("Consider collecting more data for robust analysis")
    elif total_values > settings.insights_large_sample:
        sections.next_steps.append("Large dataset - consider sampling for exploratory analysis")

    if sheet_column_count > 1:
        sections.next_steps.extend(
            [
                "Perform cross-column correlation analysis",
                "Create pivot tables for multi-dimensional analysis",
                "Consider creating composite metrics from multiple columns",
            ]
        )
    return sections


def narrate(
    partition: ValuePartition,
    numeric: NumericSummary | None,
    text: TextSummary | None,
    completeness: float,
    sheet_column_count: int,
) -> StructuredInsights:
    kind = partition.kind
    if kind is ColumnKind.NUMERIC and numeric is not None:
        sections = _numeric_sections(numeric, completeness, partition.empty_values)
    elif kind is ColumnKind.TEXT and text is not None:
        sections = _text_sections(text, completeness, partition.empty_values)
    elif kind is ColumnKind.MIXED:
        sections = _mixed_sections(len(partition.numeric), len(partition.text))
    else:
        sections = InsightSections()

    sections.extend(_global_sections(partition.total_values, sheet_column_count))
    return StructuredInsights(
        key_findings=sections.key_findings,
        business_insights=sections.business_insights,
        data_quality_issues=sections.data_quality_issues,
        next_steps=sections.next_steps,
    )
