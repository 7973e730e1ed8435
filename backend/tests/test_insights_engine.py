import math
import re

from app.core.config import ENGINE_LABELS
from app.insights.classifier import classify_values, parse_number
from app.insights.engine import analyze_column
from app.insights.models import ColumnKind
from app.insights.narrator import has_outliers, outlier_bounds
from app.insights.statistics import completeness, summarize_numeric, summarize_text, to_fixed


def test_classifier_routes_values_to_partitions() -> None:
    column = [" 12.5 ", "1e3", -4, 7.0, "1,000", "$5", "inf", "abc", True, None, "", float("nan")]
    partition = classify_values(column)

    assert partition.numeric == [12.5, 1000.0, -4.0, 7.0]
    assert partition.text == ["1,000", "$5", "inf", "abc", "True"]
    assert partition.empty_values == 3
    assert partition.total_values + partition.empty_values == len(column)
    assert partition.kind is ColumnKind.MIXED


def test_parse_number_accepts_plain_decimals_only() -> None:
    assert parse_number("+3") == 3.0
    assert parse_number(".5") == 0.5
    assert parse_number("-2.") == -2.0
    assert parse_number("1_000") is None
    assert parse_number("12abc") is None
    assert parse_number("1e999") is None
    assert parse_number(False) is None
    assert parse_number("١٢") is None
    assert parse_number("５") is None
    assert classify_values(["١٢", "５"]).kind is ColumnKind.TEXT


def test_numeric_summary_matches_nearest_rank_scenario() -> None:
    summary = summarize_numeric([1, 2, 3, 4, 5, 100])

    assert summary is not None
    assert round(summary.mean, 2) == 19.17
    assert summary.median == 3.5
    assert summary.q1 == 2
    assert summary.q3 == 5
    assert summary.iqr == 3
    assert outlier_bounds(summary) == (-2.5, 9.5)
    assert has_outliers(summary)


def test_quartiles_are_ordered_within_range() -> None:
    samples = [
        [5.0],
        [3.0, 1.0],
        [10.0, -2.0, 7.5, 7.5, 0.0],
        [float(value) for value in range(37)],
        [2.0, 2.0, 2.0, 90.0, -40.0, 3.5, 8.0, 1.25],
    ]
    for values in samples:
        summary = summarize_numeric(values)
        assert summary is not None
        assert summary.min <= summary.q1 <= summary.median <= summary.q3 <= summary.max


def test_single_value_has_zero_spread() -> None:
    summary = summarize_numeric([42.0])

    assert summary is not None
    assert summary.mean == summary.median == 42
    assert summary.variance == 0
    assert summary.standard_deviation == 0
    assert summary.q1 == summary.q3 == 42
    assert summary.iqr == 0
    assert summary.coefficient_of_variation == 0


def test_zero_mean_leaves_coefficient_of_variation_undefined() -> None:
    result = analyze_column([-1, 1], sheet_column_count=1, source_label="zero.xlsx")

    assert result.basic_insights.coefficient_of_variation is None
    findings = result.ai_insights.structured_insights.key_findings
    assert "Variability: Undetermined (CV: n/a, mean is zero)" in findings
    assert not result.ai_insights.structured_insights.business_insights


def test_text_summary_is_case_sensitive() -> None:
    summary = summarize_text(["Red", "red", "Blue", "Blue", "Blue"])

    assert summary is not None
    assert summary.most_common == [("Blue", 3), ("Red", 1), ("red", 1)]
    assert summary.unique_count == 3
    assert summary.diversity == 0.6


def test_text_summary_keeps_top_ten() -> None:
    values = [f"item-{index}" for index in range(15)] + ["item-3"] * 4
    summary = summarize_text(values)

    assert summary is not None
    assert len(summary.most_common) == 10
    assert summary.most_common[0] == ("item-3", 5)
    assert summary.unique_count == 15


def test_completeness_of_empty_column_is_full() -> None:
    assert completeness(classify_values([])) == 100.0
    assert completeness(classify_values([1, None, None, 4])) == 50.0


def test_numeric_column_insights() -> None:
    result = analyze_column([1, 2, 3, 4, 5, 100], sheet_column_count=3, source_label="sales.xlsx", column_name="amount")
    basic = result.basic_insights
    structured = result.ai_insights.structured_insights

    assert basic.data_type == "numeric"
    assert basic.mean == "19.17"
    assert basic.median == "3.50"
    assert basic.q1 == "2.00"
    assert basic.q3 == "5.00"
    assert basic.iqr == "3.00"
    assert basic.sum == "115.00"
    assert basic.min == 1
    assert basic.max == 100
    assert basic.text_values is None

    assert structured.key_findings[0] == "Dataset contains 6 numeric values with average 19.17"
    assert "Data distribution is right-skewed (mean: 19.17, median: 3.50)" in structured.key_findings
    assert "Middle 50% of data ranges from 2.00 to 5.00 (IQR: 3.00)" in structured.key_findings
    assert structured.business_insights[0].startswith("High variability")
    assert "Most values are below average with some high outliers" in structured.business_insights
    assert "Potential outliers detected - review extreme values for accuracy" in structured.data_quality_issues
    assert "Small sample size - results may not be statistically significant" in structured.data_quality_issues
    assert "Investigate factors causing high variability" in structured.next_steps
    assert structured.next_steps[-1] == "Consider creating composite metrics from multiple columns"


def test_stable_numeric_column_gets_planning_notes() -> None:
    values = [100 + (index % 3) for index in range(40)]
    structured = analyze_column(values, sheet_column_count=1, source_label="f.csv").ai_insights.structured_insights

    assert structured.business_insights[:2] == [
        "Low variability suggests consistent performance - good for predictable planning",
        "Consider this as a stable baseline for forecasting and budgeting",
    ]
    assert structured.data_quality_issues == []
    assert structured.next_steps == [
        "Create histogram to visualize data distribution",
        "Perform correlation analysis with other numeric columns",
        "Consider time-series analysis if temporal data is available",
    ]


def test_missing_values_reduce_completeness() -> None:
    structured = analyze_column([1, 2, 3, None], sheet_column_count=1, source_label="f.csv").ai_insights.structured_insights

    assert "Data completeness is 75.0% - 1 missing values detected" in structured.data_quality_issues


def test_text_column_flags_near_duplicates() -> None:
    result = analyze_column(["Red", "red", "Blue", "Blue", "Blue"], sheet_column_count=1, source_label="colors.xlsx")
    basic = result.basic_insights
    structured = result.ai_insights.structured_insights

    assert basic.data_type == "text"
    assert basic.unique_text_values == 3
    assert basic.diversity == "0.600"
    assert basic.most_common_values == [("Blue", 3), ("Red", 1), ("red", 1)]
    assert structured.key_findings == [
        "Dataset contains 3 unique categories from 5 total values",
        "Data diversity index: 0.6 (Moderate diversity)",
        'Most frequent category: "Blue" (60.0% of data)',
    ]
    assert structured.business_insights == []
    assert (
        "Potential duplicate categories with slight variations detected - consider data standardization"
        in structured.data_quality_issues
    )
    assert "Explore hierarchical categorization" in structured.next_steps


def test_low_diversity_text_suggests_consolidation() -> None:
    values = ["North"] * 20 + ["South"] * 20
    structured = analyze_column(values, sheet_column_count=1, source_label="f.csv").ai_insights.structured_insights

    assert structured.business_insights[0] == "Low diversity suggests data is concentrated in few categories"
    assert structured.data_quality_issues == []


def test_mixed_column_emits_type_notes_only() -> None:
    result = analyze_column(["1", "2", "abc"], sheet_column_count=1, source_label="f.csv")
    basic = result.basic_insights
    structured = result.ai_insights.structured_insights

    assert basic.data_type == "mixed"
    assert basic.numeric_values == 2
    assert basic.text_values == 1
    assert structured.key_findings == [
        "Mixed data type: 2 numeric and 1 text values",
        "Data inconsistency detected - may need cleaning or type conversion",
    ]
    assert structured.business_insights == []
    assert structured.data_quality_issues[:2] == [
        "Mixed data types in single column indicate potential data quality issues",
        "Consider separating numeric and text data or standardizing format",
    ]
    assert structured.next_steps[0] == "Analyze data entry patterns to identify root cause"


def test_empty_column_only_reports_sample_size() -> None:
    result = analyze_column([None] * 5 + [""] * 5, sheet_column_count=1, source_label="empty.xlsx")
    basic = result.basic_insights
    structured = result.ai_insights.structured_insights

    assert basic.total_values == 0
    assert basic.empty_values == 10
    assert basic.data_type is None
    assert basic.mean is None
    assert basic.most_common_values is None
    assert structured.key_findings == []
    assert structured.business_insights == []
    assert structured.data_quality_issues == ["Small sample size - results may not be statistically significant"]
    assert structured.next_steps == ["Consider collecting more data for robust analysis"]


def test_large_column_suggests_sampling() -> None:
    structured = analyze_column(list(range(10001)), sheet_column_count=1, source_label="big.csv").ai_insights.structured_insights

    assert "Large dataset - consider sampling for exploratory analysis" in structured.next_steps


def test_serialized_shape_uses_camel_case_and_constant_labels() -> None:
    payload = analyze_column([1.5, 2.5], sheet_column_count=2, source_label="book.xlsx", column_name="x").model_dump(
        by_alias=True
    )

    basic = payload["basicInsights"]
    ai = payload["aiInsights"]
    assert basic["totalValues"] == 2
    assert basic["standardDeviation"] == "0.50"
    assert basic["coefficientOfVariation"] == "25.00"
    assert basic["min"] == 1.5
    assert set(ai["structuredInsights"]) == {"keyFindings", "businessInsights", "dataQualityIssues", "nextSteps"}
    assert ai["model"] == ENGINE_LABELS.model == "enhanced-analytics-engine"
    assert ai["source"] == "internal"
    assert ai["confidence"] == "high"
    assert ai["analysisDepth"] == "comprehensive"
    assert ai["rawInsight"].startswith("Professional data analysis completed for book.xlsx.")
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", ai["generatedAt"])


def test_floating_noise_does_not_create_skew() -> None:
    summary = summarize_numeric([0.1, 0.2, 0.3])

    assert summary is not None
    assert math.isclose(summary.mean, summary.median)
    structured = analyze_column([0.1, 0.2, 0.3], sheet_column_count=1, source_label="f.csv").ai_insights.structured_insights
    assert "Data distribution is symmetric (mean: 0.20, median: 0.20)" in structured.key_findings


def test_to_fixed_rounds_ties_away_from_zero() -> None:
    assert to_fixed(1.125) == "1.13"
    assert to_fixed(-1.125) == "-1.13"
    assert to_fixed(0.0625, 3) == "0.063"
    assert to_fixed(2.675) == "2.67"
    assert to_fixed(0.5, 0) == "1"
    assert to_fixed(12.25, 1) == "12.3"


def test_quarter_values_round_half_up_in_summary_and_text() -> None:
    result = analyze_column([1, 1.25], sheet_column_count=1, source_label="f.csv")
    basic = result.basic_insights
    structured = result.ai_insights.structured_insights

    assert basic.mean == "1.13"
    assert basic.median == "1.13"
    assert "Dataset contains 2 numeric values with average 1.13" in structured.key_findings


def test_diversity_index_rounds_half_up() -> None:
    result = analyze_column(["a"] * 16, sheet_column_count=1, source_label="f.csv")

    assert result.basic_insights.diversity == "0.063"
    assert "Data diversity index: 0.063 (Low diversity)" in result.ai_insights.structured_insights.key_findings
