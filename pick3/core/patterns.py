"""
pick3/core/patterns.py
Unordered (BBB/BBA/BAA/AAA) and ordered (8 permutation) B/A patterns of a draw.
Both functions are total: malformed input returns an error code string.
"""
from __future__ import annotations

from itertools import combinations, product
from typing import Any

from pick3.core.digits import CATEGORY_B_MAX, category, is_digit

INVALID_INPUT = "INVALID_INPUT"
NUM_OUT_OF_RANGE = "NUM_OUT_OF_RANGE"
ERROR_CODES = (INVALID_INPUT, NUM_OUT_OF_RANGE)

UNORDERED_PATTERNS: tuple[str, ...] = ("BBB", "BBA", "BAA", "AAA")
ORDERED_PATTERNS: tuple[str, ...] = tuple("".join(p) for p in product("BA", repeat=3))
MIXED_ORDERED_PATTERNS: tuple[str, ...] = ("BBA", "BAB", "ABB", "BAA", "ABA", "AAB")

# B count -> unordered pattern
_BY_B_COUNT = {3: "BBB", 2: "BBA", 1: "BAA", 0: "AAA"}


def _check(numbers: Any) -> str | None:
    if not isinstance(numbers, (list, tuple)) or len(numbers) != 3:
        return INVALID_INPUT
    if not all(is_digit(n) for n in numbers):
        return NUM_OUT_OF_RANGE
    return None


def unordered_pattern(numbers: Any, category_b_max: int = CATEGORY_B_MAX) -> str:
    error = _check(numbers)
    if error:
        return error
    b_count = sum(1 for n in numbers if category(n, category_b_max) == "B")
    return _BY_B_COUNT[b_count]


def ordered_pattern(numbers: Any, category_b_max: int = CATEGORY_B_MAX) -> str:
    error = _check(numbers)
    if error:
        return error
    return "".join(category(n, category_b_max) for n in numbers)


def pattern_from_ordered(pattern: str) -> str:
    """Collapse an ordered pattern to its unordered multiset form (BAB -> BBA)."""
    if pattern not in ORDERED_PATTERNS:
        return pattern
    return _BY_B_COUNT[pattern.count("B")]


def matching_category_positions(pattern: str) -> list[tuple[int, int]]:
    """All position pairs (i, j), i < j, that share a category."""
    return [(i, j) for i, j in combinations(range(len(pattern)), 2) if pattern[i] == pattern[j]]
