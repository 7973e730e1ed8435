from __future__ import annotations

from typing import Any

import pandas as pd

from app.insights.classifier import is_missing, parse_number
from app.insights.models import ChartData

CHART_TYPES = ("bar", "line", "pie", "scatter", "column3d")

PIE_PALETTE = [
    "rgba(255, 99, 132, 0.8)",
    "rgba(54, 162, 235, 0.8)",
    "rgba(255, 205, 86, 0.8)",
    "rgba(75, 192, 192, 0.8)",
    "rgba(153, 102, 255, 0.8)",
    "rgba(255, 159, 64, 0.8)",
]
PRIMARY_BORDER = "rgba(54, 162, 235, 1)"


def build_points(rows: list[list[Any]], x_index: int, y_index: int) -> pd.DataFrame:
    """Collect (x, y) pairs from sheet rows where x is present and y is numeric."""
    records: list[dict[str, Any]] = []
    for row_index, row in enumerate(rows):
        x_value = row[x_index] if x_index < len(row) else None
        y_value = row[y_index] if y_index < len(row) else None
        if is_missing(x_value) or is_missing(y_value):
            continue
        y_number = parse_number(y_value)
        if y_number is None:
            continue
        records.append({"x": x_value, "y": y_number, "row_index": row_index})
    frame = pd.DataFrame(records, columns=["x", "y", "row_index"])
    # Labels stay as the cells held them; mixed ints and floats must not be upcast.
    frame["x"] = pd.Series([record["x"] for record in records], dtype="object")
    return frame


def _build_pie_chart(points: pd.DataFrame, y_axis: str) -> ChartData:
    totals = points.groupby(points["x"].astype(str), sort=False)["y"].sum()
    return ChartData(
        labels=[str(label) for label in totals.index],
        datasets=[
            {
                "label": y_axis,
                "data": [float(value) for value in totals.values],
                "backgroundColor": PIE_PALETTE,
                "borderWidth": 1,
            }
        ],
    )


def _build_scatter_chart(points: pd.DataFrame, x_axis: str, y_axis: str) -> ChartData:
    data = [{"x": x, "y": float(y)} for x, y in zip(points["x"].tolist(), points["y"].tolist())]
    return ChartData(
        labels=None,
        datasets=[
            {
                "label": f"{x_axis} vs {y_axis}",
                "data": data,
                "backgroundColor": "rgba(54, 162, 235, 0.6)",
                "borderColor": PRIMARY_BORDER,
                "borderWidth": 1,
            }
        ],
    )


def _build_series_chart(points: pd.DataFrame, y_axis: str, chart_type: str) -> ChartData:
    values = [float(value) for value in points["y"].tolist()]
    if chart_type == "line":
        background: str | list[str] = "rgba(54, 162, 235, 0.2)"
    else:
        background = [
            f"hsla({index * 360 / len(values):g}, 70%, 60%, 0.8)" for index in range(len(values))
        ]
    return ChartData(
        labels=points["x"].tolist(),
        datasets=[
            {
                "label": y_axis,
                "data": values,
                "backgroundColor": background,
                "borderColor": PRIMARY_BORDER,
                "borderWidth": 2,
                "fill": chart_type != "line",
            }
        ],
    )


def build_chart_data(
    points: pd.DataFrame,
    x_axis: str,
    y_axis: str,
    chart_type: str,
) -> ChartData:
    if chart_type == "pie":
        return _build_pie_chart(points, y_axis)
    if chart_type == "scatter":
        return _build_scatter_chart(points, x_axis, y_axis)
    return _build_series_chart(points, y_axis, chart_type)
