from __future__ import annotations

from itertools import combinations
from typing import Iterable


def levenshtein_distance(first: str, second: str) -> int:
    if len(first) < len(second):
        first, second = second, first
    previous = list(range(len(second) + 1))
    for i, left in enumerate(first, start=1):
        current = [i]
        for j, right in enumerate(second, start=1):
            cost = 0 if left == right else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def similarity(first: str, second: str) -> float:
    longest = max(len(first), len(second))
    if longest == 0:
        return 1.0
    return 1 - levenshtein_distance(first, second) / longest


def find_similar_categories(
    categories: Iterable[str],
    threshold: float = 0.8,
) -> list[tuple[str, str]]:
    lowered = [category.lower() for category in categories]
    return [
        (first, second)
        for first, second in combinations(lowered, 2)
        if similarity(first, second) > threshold
    ]
