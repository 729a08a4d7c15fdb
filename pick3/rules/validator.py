"""
pick3/rules/validator.py
Rule validator for COMBO (unordered), RANGE_SPREAD (historic unordered) and
STRAIGHT (ordered) plays.

Every rule set runs the same short-circuiting chain:
  1. exactly three digits 0-9            -> INVALID
  2. no repeated digit                    -> REPEATING
  3. rule-set specific shape check        -> PATTERN / RANGE
  4. spread of the same-category pair     -> DIFFERENCE
The validator never raises: malformed input gives an INVALID outcome.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pick3.core.digits import is_digit
from pick3.core.patterns import (
    MIXED_ORDERED_PATTERNS,
    matching_category_positions,
    ordered_pattern,
    unordered_pattern,
)
from pick3.utils.config import AnalysisConfig

DEFAULT_CONFIG = AnalysisConfig()

# ── Outcome codes ─────────────────────────────────────────────────
PASS = "PASS"
INVALID = "INVALID"
REPEATING = "REPEATING"
PATTERN = "PATTERN"
DIFFERENCE = "DIFFERENCE"
RANGE = "RANGE"


class RuleSet(str, Enum):
    COMBO = "combo"
    RANGE_SPREAD = "range_spread"
    STRAIGHT = "straight"

    @property
    def is_ordered(self) -> bool:
        return self is RuleSet.STRAIGHT

    @property
    def allowed_patterns(self) -> tuple[str, ...]:
        if self is RuleSet.STRAIGHT:
            return MIXED_ORDERED_PATTERNS
        if self is RuleSet.COMBO:
            return ("BBA", "BAA")
        return ()


@dataclass(frozen=True)
class ValidationOutcome:
    valid: bool
    pattern: str
    code: str
    reason: str
    difference: int | None = None
    digits: tuple[int, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "pattern": self.pattern,
            "code": self.code,
            "reason": self.reason,
            "difference": self.difference,
            "digits": list(self.digits) if self.digits is not None else None,
        }


def pattern_for(digits: Any, rule_set: RuleSet, config: AnalysisConfig = DEFAULT_CONFIG) -> str:
    if rule_set.is_ordered:
        return ordered_pattern(digits, config.category_b_max)
    return unordered_pattern(digits, config.category_b_max)


def category_difference(digits: tuple[int, ...], config: AnalysisConfig = DEFAULT_CONFIG) -> tuple[int, int, int] | None:
    """
    (i, j, |d[i]-d[j]|) for the single pair of positions sharing a category,
    or None for BBB / AAA. On sorted digits this is d[1]-d[0] for BBA and
    d[2]-d[1] for BAA.
    """
    positions = matching_category_positions(ordered_pattern(digits, config.category_b_max))
    if len(positions) != 1:
        return None
    i, j = positions[0]
    return i, j, abs(digits[i] - digits[j])


def validate(
    numbers: Any,
    rule_set: RuleSet = RuleSet.COMBO,
    config: AnalysisConfig = DEFAULT_CONFIG,
    allow_repeats: bool = False,
) -> ValidationOutcome:
    if not isinstance(numbers, (list, tuple)) or len(numbers) != 3:
        return ValidationOutcome(False, INVALID, INVALID, "Must have exactly 3 numbers")
    if not all(is_digit(n) for n in numbers):
        return ValidationOutcome(False, INVALID, INVALID, "Numbers must be 0-9")

    digits = tuple(numbers) if rule_set.is_ordered else tuple(sorted(numbers))
    pattern = pattern_for(digits, rule_set, config)

    if not allow_repeats and len(set(digits)) != 3:
        return ValidationOutcome(False, pattern, REPEATING, "No repeating numbers allowed", digits=digits)

    if rule_set is RuleSet.RANGE_SPREAD:
        return _check_range_spread(digits, pattern, config)
    return _check_pattern_spread(digits, pattern, rule_set, config)


def _check_range_spread(digits: tuple[int, ...], pattern: str, config: AnalysisConfig) -> ValidationOutcome:
    low, high = config.range_spread_low, config.range_spread_high
    if digits[0] not in low or digits[2] not in high:
        return ValidationOutcome(
            False, pattern, RANGE,
            f"Needs lowest digit in {list(low)} and highest in {list(high)}, got {list(digits)}",
            digits=digits,
        )
    return ValidationOutcome(True, pattern, PASS, "PASS", digits=digits)


def _check_pattern_spread(
    digits: tuple[int, ...], pattern: str, rule_set: RuleSet, config: AnalysisConfig
) -> ValidationOutcome:
    if pattern not in rule_set.allowed_patterns:
        reason = (
            f"Pattern {pattern} not in valid set" if rule_set.is_ordered else f"Invalid pattern: {pattern}"
        )
        return ValidationOutcome(False, pattern, PATTERN, reason, digits=digits)

    i, j, diff = category_difference(digits, config)
    if diff > config.max_allowed_diff:
        if rule_set.is_ordered:
            reason = (
                f"Difference between matching {pattern[i]} numbers ({digits[i]}, {digits[j]}) "
                f"is {diff} > {config.max_allowed_diff}"
            )
        else:
            reason = f"{pattern} difference {diff} > {config.max_allowed_diff}"
        return ValidationOutcome(False, pattern, DIFFERENCE, reason, difference=diff, digits=digits)

    return ValidationOutcome(True, pattern, PASS, "PASS", difference=diff, digits=digits)


def validate_combo(numbers: Any, config: AnalysisConfig = DEFAULT_CONFIG) -> ValidationOutcome:
    return validate(numbers, RuleSet.COMBO, config)


def validate_range_spread(numbers: Any, config: AnalysisConfig = DEFAULT_CONFIG) -> ValidationOutcome:
    return validate(numbers, RuleSet.RANGE_SPREAD, config)


def validate_straight(numbers: Any, config: AnalysisConfig = DEFAULT_CONFIG) -> ValidationOutcome:
    return validate(numbers, RuleSet.STRAIGHT, config)
