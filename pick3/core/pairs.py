"""
pick3/core/pairs.py
Pair axes over sorted draw digits, canonical "min-max" pair keys and the
closed-form count of digits that complete a pair into a sorted draw.
"""
from __future__ import annotations

from enum import Enum


class PairAxis(str, Enum):
    FIRST_SECOND = "first-second"
    FIRST_THIRD = "first-third"
    SECOND_THIRD = "second-third"

    @property
    def positions(self) -> tuple[int, int]:
        return _POSITIONS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_POSITIONS = {
    PairAxis.FIRST_SECOND: (0, 1),
    PairAxis.FIRST_THIRD: (0, 2),
    PairAxis.SECOND_THIRD: (1, 2),
}

_LABELS = {
    PairAxis.FIRST_SECOND: "1st & 2nd",
    PairAxis.FIRST_THIRD: "1st & 3rd",
    PairAxis.SECOND_THIRD: "2nd & 3rd",
}


def format_pair_key(a: int, b: int) -> str:
    return f"{min(a, b)}-{max(a, b)}"


def pair_key(digits: tuple[int, ...] | list[int], axis: PairAxis = PairAxis.FIRST_SECOND) -> str:
    p, q = axis.positions
    return format_pair_key(digits[p], digits[q])


def all_pair_keys() -> list[tuple[int, int]]:
    """Every (i, j) with 0 <= i <= j <= 9: 45 distinct-digit pairs plus 10 repeats."""
    return [(i, j) for i in range(10) for j in range(i, 10)]


def possible_completions(i: int, j: int, axis: PairAxis = PairAxis.FIRST_SECOND) -> int:
    """
    Number of digits that complete pair (i, j), i <= j, into a sorted draw,
    repeats included:
      first-second: third in [j, 9]
      first-third:  middle in [i, j]
      second-third: first in [0, i]
    """
    if axis is PairAxis.FIRST_SECOND:
        return 10 - j
    if axis is PairAxis.FIRST_THIRD:
        return j - i + 1
    return i + 1


def completions(i: int, j: int, axis: PairAxis = PairAxis.FIRST_SECOND) -> list[tuple[int, int, int]]:
    """The sorted draws that contain (i, j) on the given axis."""
    if axis is PairAxis.FIRST_SECOND:
        return [(i, j, k) for k in range(j, 10)]
    if axis is PairAxis.FIRST_THIRD:
        return [(i, k, j) for k in range(i, j + 1)]
    return [(k, i, j) for k in range(0, i + 1)]


def completion_digit(digits: tuple[int, ...], axis: PairAxis) -> int:
    """The digit of a sorted draw that is not on the axis."""
    p, q = axis.positions
    (other,) = {0, 1, 2} - {p, q}
    return digits[other]
