"""
pick3/core/combination.py
Canonical (sorted) 3-digit combinations and the 220-entry generator
(digits 0-9 choose 3 with replacement).
"""
from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations_with_replacement
from typing import Any, Iterable

from pick3.core.cascade import cascade, cascade_details
from pick3.core.digits import is_digit_vector
from pick3.core.patterns import unordered_pattern
from pick3.rules.validator import DEFAULT_CONFIG, RuleSet, validate
from pick3.utils.config import AnalysisConfig
from pick3.utils.logger import get_logger

log = get_logger("core.combination")


@dataclass(frozen=True)
class Combination:
    numbers: tuple[int, int, int]
    pattern: str
    cascade_number: int
    id: int | None = None

    @property
    def key(self) -> str:
        return "-".join(str(n) for n in self.numbers)

    @classmethod
    def from_digits(cls, digits: Iterable[int], id: int | None = None, config: AnalysisConfig = DEFAULT_CONFIG) -> "Combination":
        numbers = tuple(sorted(digits))
        if not is_digit_vector(numbers):
            raise ValueError(f"A combination needs three digits 0-9, got {numbers!r}")
        return cls(
            numbers=numbers,
            pattern=unordered_pattern(numbers, config.category_b_max),
            cascade_number=cascade(numbers),
            id=id,
        )

    @classmethod
    def from_record(cls, record: dict[str, Any], config: AnalysisConfig = DEFAULT_CONFIG) -> "Combination | None":
        """Parse a stored combination row; malformed rows give None."""
        numbers = None
        for field_name in ("sorted_numbers", "numbers", "sortedNumbers"):
            value = record.get(field_name) if isinstance(record, dict) else None
            if isinstance(value, (list, tuple)) and is_digit_vector(list(value)):
                numbers = value
                break
        if numbers is None:
            ref = record.get("id") if isinstance(record, dict) else record
            log.warning(f"Skipping combination {ref}: invalid numbers")
            return None
        return cls.from_digits(numbers, id=record.get("id"), config=config)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "numbers": list(self.numbers),
            "pattern": self.pattern,
            "cascade_number": self.cascade_number,
        }


def generate_combinations(config: AnalysisConfig = DEFAULT_CONFIG) -> list[dict[str, Any]]:
    """
    All 220 sorted combinations with ids 1..220, annotated with the COMBO rule
    outcome. Repeats are tolerated here so that e.g. 1-1-5 counts as a valid BBA.
    """
    rows = []
    for idx, numbers in enumerate(combinations_with_replacement(range(10), 3), start=1):
        combo = Combination.from_digits(numbers, id=idx, config=config)
        outcome = validate(numbers, RuleSet.COMBO, config, allow_repeats=True)
        rows.append({
            **combo.to_record(),
            "is_valid": outcome.valid,
            "validation_reason": outcome.reason,
            "has_unique_numbers": len(set(numbers)) == 3,
            "sum": sum(numbers),
            "cascade_details": cascade_details(numbers),
        })
    return rows


def generation_stats(rows: list[dict[str, Any]]) -> dict[str, Any]:
    patterns = {p: 0 for p in ("BBB", "BBA", "BAA", "AAA")}
    cascade_distribution = {d: 0 for d in range(10)}
    for row in rows:
        patterns[row["pattern"]] += 1
        cascade_distribution[row["cascade_number"]] += 1
    return {
        "total_combinations": len(rows),
        "patterns": patterns,
        "valid_combinations": sum(1 for r in rows if r["is_valid"]),
        "unique_number_combinations": sum(1 for r in rows if r["has_unique_numbers"]),
        "cascade_distribution": cascade_distribution,
        "valid_bba": sum(1 for r in rows if r["is_valid"] and r["pattern"] == "BBA"),
        "valid_baa": sum(1 for r in rows if r["is_valid"] and r["pattern"] == "BAA"),
    }
