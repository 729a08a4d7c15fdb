"""
pick3/rules/fireball.py
Fireball substitution: replace each draw position with the fireball digit and
re-run the rule validator on the three candidates.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pick3.core.digits import is_digit, is_digit_vector
from pick3.core.draw import Draw
from pick3.rules.validator import DEFAULT_CONFIG, RuleSet, validate
from pick3.utils.config import AnalysisConfig


@dataclass(frozen=True)
class FireballDetail:
    position: int                      # 1-based position replaced
    substitution: tuple[int, ...]      # candidate before any re-sort
    checked: tuple[int, ...]           # vector the validator saw
    pattern: str


@dataclass(frozen=True)
class FireballResult:
    has_valid_fireball: bool = False
    substitutions_passed: int = 0
    details: tuple[FireballDetail, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_valid_fireball": self.has_valid_fireball,
            "substitutions_passed": self.substitutions_passed,
            "details": [
                {
                    "position": d.position,
                    "substitution": list(d.substitution),
                    "checked": list(d.checked),
                    "pattern": d.pattern,
                }
                for d in self.details
            ],
        }


NO_FIREBALL = FireballResult()


def substitutions(digits: tuple[int, ...] | list[int], fireball: int) -> list[tuple[int, ...]]:
    """The three single-position replacements, in position order."""
    return [tuple(fireball if k == pos else d for k, d in enumerate(digits)) for pos in range(3)]


def analyze_fireball(
    digits: Any,
    fireball: Any,
    rule_set: RuleSet = RuleSet.COMBO,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> FireballResult:
    if not is_digit(fireball) or not is_digit_vector(digits):
        return NO_FIREBALL

    details = []
    for position, candidate in enumerate(substitutions(digits, fireball), start=1):
        outcome = validate(candidate, rule_set, config)
        if outcome.valid:
            details.append(FireballDetail(position, candidate, outcome.digits, outcome.pattern))

    return FireballResult(
        has_valid_fireball=bool(details),
        substitutions_passed=len(details),
        details=tuple(details),
    )


def analyze_draw_fireball(
    draw: Draw,
    rule_set: RuleSet = RuleSet.COMBO,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> FireballResult:
    digits = draw.original_digits if rule_set.is_ordered else draw.sorted_digits
    if digits is None:
        return NO_FIREBALL
    return analyze_fireball(digits, draw.fireball, rule_set, config)
