from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

import pandas as pd

from app.insights.models import (
    BasicInsights,
    ColumnKind,
    NumericSummary,
    TextSummary,
    ValuePartition,
)


# Wide enough for every finite float written out in full.
_FIXED_CONTEXT = Context(prec=400)


def summarize_numeric(values: list[float]) -> NumericSummary | None:
    if not values:
        return None
    series = pd.Series(values, dtype="float64")
    ordered = series.sort_values(ignore_index=True)
    count = len(ordered)

    total = float(series.sum())
    mean = total / count
    variance = float(series.var(ddof=0))
    standard_deviation = math.sqrt(variance)
    # Nearest-rank quartiles on the sorted values, no interpolation.
    q1 = float(ordered.iloc[int(count * 0.25)])
    q3 = float(ordered.iloc[int(count * 0.75)])
    minimum = float(ordered.iloc[0])
    maximum = float(ordered.iloc[-1])
    cv = (standard_deviation / mean) * 100 if mean != 0 else None

    return NumericSummary(
        count=count,
        sum=total,
        mean=mean,
        median=float(ordered.median()),
        min=minimum,
        max=maximum,
        range=maximum - minimum,
        variance=variance,
        standard_deviation=standard_deviation,
        q1=q1,
        q3=q3,
        iqr=q3 - q1,
        coefficient_of_variation=cv,
    )


def summarize_text(values: list[str], top_n: int = 10) -> TextSummary | None:
    if not values:
        return None
    counts = (
        pd.Series(values, dtype="object")
        .value_counts(sort=False)
        .sort_values(ascending=False, kind="stable")
    )
    most_common = [(str(label), int(count)) for label, count in counts.head(top_n).items()]
    return TextSummary(
        count=len(values),
        unique_count=len(counts),
        most_common=most_common,
        diversity=float(to_fixed(len(counts) / len(values), 3)),
    )


def completeness(partition: ValuePartition) -> float:
    """Share of non-empty cells in percent; an empty column counts as complete."""
    if partition.total_rows == 0:
        return 100.0
    return partition.total_values / partition.total_rows * 100


def to_fixed(value: float, digits: int = 2) -> str:
    """Format with exact half-up rounding on the binary value, as spreadsheets display it."""
    if not math.isfinite(value):
        return "NaN" if math.isnan(value) else ("Infinity" if value > 0 else "-Infinity")
    exponent = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT))


def _raw_number(value: float) -> int | float:
    return int(value) if value.is_integer() else value


def build_basic_insights(
    column: str,
    partition: ValuePartition,
    numeric: NumericSummary | None,
    text: TextSummary | None,
) -> BasicInsights:
    fields: dict[str, Any] = {
        "column": column,
        "total_values": partition.total_values,
        "empty_values": partition.empty_values,
    }
    if numeric is not None:
        cv = numeric.coefficient_of_variation
        fields.update(
            numeric_values=numeric.count,
            sum=to_fixed(numeric.sum),
            mean=to_fixed(numeric.mean),
            median=to_fixed(numeric.median),
            min=_raw_number(numeric.min),
            max=_raw_number(numeric.max),
            range=to_fixed(numeric.range),
            standard_deviation=to_fixed(numeric.standard_deviation),
            variance=to_fixed(numeric.variance),
            q1=to_fixed(numeric.q1),
            q3=to_fixed(numeric.q3),
            iqr=to_fixed(numeric.iqr),
            coefficient_of_variation=to_fixed(cv) if cv is not None else None,
        )
    if text is not None:
        fields.update(
            text_values=text.count,
            unique_text_values=text.unique_count,
            most_common_values=text.most_common,
            diversity=to_fixed(text.diversity, 3),
        )
    if partition.kind is not ColumnKind.EMPTY:
        fields["data_type"] = partition.kind.value
    return BasicInsights(**fields)
