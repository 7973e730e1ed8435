from __future__ import annotations

import math
import re
from numbers import Real
from typing import Any, Iterable

from app.insights.models import ValuePartition

_DECIMAL_PATTERN = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$", re.ASCII)


def is_missing(value: Any) -> bool:
    if value is None or value == "":
        return True
    return isinstance(value, float) and math.isnan(value)


def parse_number(value: Any) -> float | None:
    """Return the finite float a cell holds, or None when it is not numeric.

    Strings must be plain decimals (sign, digits, optional fraction and
    exponent); thousands separators, currency symbols and words such as
    ``inf`` are rejected. Booleans are never numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str) and _DECIMAL_PATTERN.match(value):
        number = float(value)
    else:
        return None
    return number if math.isfinite(number) else None


def classify_values(column: Iterable[Any]) -> ValuePartition:
    partition = ValuePartition()
    for value in column:
        if is_missing(value):
            partition.empty_values += 1
            continue
        number = parse_number(value)
        if number is None:
            partition.text.append(value if isinstance(value, str) else str(value))
        else:
            partition.numeric.append(number)
    return partition
