"""
pick3/analysis/history_check.py
Look up a 1-3 digit play prefix against the sorted digits of past draws.
"""
from __future__ import annotations

from typing import Any, Iterable

from pick3.analysis.draw_report import pct
from pick3.core.digits import category, is_digit
from pick3.core.draw import Draw
from pick3.rules.validator import DEFAULT_CONFIG
from pick3.utils.config import AnalysisConfig

RECENT_LIMIT = 10
COLD_AFTER_DRAWS = 50


def _match_level(prefix: tuple[int, ...], digits: tuple[int, ...]) -> int:
    level = 0
    for want, got in zip(prefix, digits):
        if want != got:
            break
        level += 1
    return level


def check_history(
    draws: Iterable[Draw],
    numbers: Iterable[int],
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> dict[str, Any]:
    """
    numbers is sorted before matching. A draw matches at level k when its
    first k sorted digits equal the prefix; level == len(numbers) is a full match.
    """
    numbers = list(numbers)
    if not 1 <= len(numbers) <= 3 or not all(is_digit(n) for n in numbers):
        raise ValueError(f"Provide 1-3 digits 0-9 to check, got {numbers!r}")
    prefix = tuple(sorted(numbers))
    size = len(prefix)

    draws = list(draws)
    total = len(draws)
    level_counts = [0, 0, 0]
    full_matches: list[dict[str, Any]] = []
    partial_matches: list[dict[str, Any]] = []
    monthly: dict[str, dict[str, Any]] = {}

    for draw in draws:
        level = _match_level(prefix, draw.sorted_digits)
        if level == 0:
            continue
        for k in range(level):
            level_counts[k] += 1

        occurrence = {
            "date": draw.date or "Unknown",
            "month": draw.month,
            "year": draw.year,
            "numbers": list(draw.sorted_digits),
            "match_level": level,
            "time": draw.time or "Unknown",
            "fireball": draw.fireball,
            "index": draw.index,
        }
        month = monthly.setdefault(draw.month_key or "Unknown", {"partial": 0, "full": 0, "dates": []})
        if level == size:
            full_matches.append(occurrence)
            month["full"] += 1
            month["dates"].append(draw.date)
        else:
            partial_matches.append(occurrence)
            month["partial"] += 1

    def newest(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return sorted(rows, key=lambda r: r["index"] if r["index"] is not None else -1, reverse=True)

    full_matches = newest(full_matches)
    partial_matches = newest(partial_matches)
    matches = newest(full_matches + partial_matches)

    def stat(level: int) -> dict[str, Any]:
        hits = [m for m in matches if m["match_level"] >= level]
        return {
            "count": level_counts[level - 1],
            "percentage": round(pct(level_counts[level - 1], total), 2),
            "last_seen": hits[0]["date"] if hits else None,
        }

    statistics: dict[str, Any] = {"first_number": stat(1), "first_two": None, "full_combination": None}
    if size >= 2:
        completions: dict[int, dict[str, Any]] = {}
        for m in matches:
            if m["match_level"] >= 2:
                third = m["numbers"][2]
                entry = completions.setdefault(third, {"number": third, "count": 0, "dates": []})
                entry["count"] += 1
                entry["dates"].append(m["date"])
        statistics["first_two"] = {
            **stat(2),
            "completions": sorted(completions.values(), key=lambda c: (-c["count"], c["number"])),
        }
    if size == 3:
        full = stat(3)
        last_index = full_matches[0]["index"] if full_matches else None
        full["is_hot"] = full["count"] > total * config.combo_policy.hot_ratio
        full["is_cold"] = full["count"] == 0 or (
            last_index is not None and last_index < total - COLD_AFTER_DRAWS
        )
        statistics["full_combination"] = full

    return {
        "numbers": list(prefix),
        "pattern": "".join(category(n, config.category_b_max) for n in prefix),
        "total_draws_analyzed": total,
        "statistics": statistics,
        "full_matches": full_matches,
        "partial_matches": partial_matches,
        "monthly_breakdown": monthly,
        "recent_occurrences": matches[:RECENT_LIMIT],
    }
