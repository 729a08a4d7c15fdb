"""
pick3/core/digits.py
B/A digit classifier: B = 0..4, A = 5..9.
"""
from __future__ import annotations

from numbers import Integral
from typing import Any

CATEGORY_B_MAX = 4


def is_digit(value: Any) -> bool:
    """True for an integer (not bool) in [0, 9]."""
    return isinstance(value, Integral) and not isinstance(value, bool) and 0 <= value <= 9


def category(digit: int, category_b_max: int = CATEGORY_B_MAX) -> str:
    if not is_digit(digit):
        raise ValueError(f"Not a digit 0-9: {digit!r}")
    return "B" if digit <= category_b_max else "A"


def is_digit_vector(values: Any, length: int = 3) -> bool:
    if not isinstance(values, (list, tuple)) or len(values) != length:
        return False
    return all(is_digit(v) for v in values)
