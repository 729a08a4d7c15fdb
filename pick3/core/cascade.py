"""
pick3/core/cascade.py
Cascade digest: fold a draw to one digit via nested absolute differences.
Example: [4, 6, 9] -> |4-6|=2, |6-9|=3, |2-3|=1 -> 1
"""
from __future__ import annotations

from typing import Any

from pick3.core.digits import is_digit_vector


def cascade(numbers: Any) -> int | None:
    """Return the cascade digit, or None when the input is not three digits."""
    if not is_digit_vector(numbers):
        return None
    a, b, c = numbers
    return abs(abs(a - b) - abs(b - c))


def cascade_details(numbers: Any) -> dict[str, Any] | None:
    final = cascade(numbers)
    if final is None:
        return None
    a, b, c = numbers
    diff1, diff2 = abs(a - b), abs(b - c)
    return {
        "diff1": diff1,
        "diff2": diff2,
        "final": final,
        "calculation": f"|{a}-{b}|={diff1}, |{b}-{c}|={diff2}, |{diff1}-{diff2}|={final}",
    }


def empty_distribution() -> dict[int, int]:
    return {d: 0 for d in range(10)}
