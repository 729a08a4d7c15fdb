"""
pick3/analysis/pair_positions.py
Monthly pair views: where each canonical pair sits inside sorted draws, and a
tracker for a fixed list of low-digit leading pairs.
"""
from __future__ import annotations

from typing import Any, Iterable

from pick3.analysis.draw_report import pct
from pick3.core.draw import Draw
from pick3.core.pairs import PairAxis, format_pair_key, pair_key, possible_completions
from pick3.utils.logger import get_logger

log = get_logger("analysis.pair_positions")

DEFAULT_TRACKED_PAIRS: tuple[tuple[int, int], ...] = ((0, 1), (1, 2), (2, 3), (0, 2), (1, 3))

_AXES = (PairAxis.FIRST_SECOND, PairAxis.FIRST_THIRD, PairAxis.SECOND_THIRD)


def filter_by_month(draws: Iterable[Draw], month: str, year: str | int) -> list[Draw]:
    year = str(year)
    return [d for d in draws if d.month == month and d.year == year]


# ── Position breakdown ────────────────────────────────────────────

def analyze_pair_positions(draws: Iterable[Draw]) -> dict[str, Any]:
    """Draws are expected newest first; the timeline keeps that order."""
    stats: dict[str, dict[str, int]] = {}
    timeline = []

    for draw in draws:
        pairs = {axis.label: pair_key(draw.sorted_digits, axis) for axis in _AXES}
        timeline.append({
            "date": draw.date or "Unknown",
            "index": draw.index,
            "pairs": pairs,
            "numbers": list(draw.sorted_digits),
        })
        for axis in _AXES:
            entry = stats.setdefault(pairs[axis.label], {**{a.value: 0 for a in _AXES}, "total": 0})
            entry[axis.value] += 1
            entry["total"] += 1

    pairs_out: dict[str, dict[str, Any]] = {}
    for key in sorted(stats):
        entry = stats[key]
        # first axis wins a tie
        dominant = max(_AXES, key=lambda a: (entry[a.value], -_AXES.index(a)))
        pairs_out[key] = {
            **entry,
            "dominant": dominant.value,
            "percentage": pct(entry[dominant.value], entry["total"]),
        }

    categories: dict[str, list[dict[str, Any]]] = {axis.value: [] for axis in _AXES}
    for key, entry in pairs_out.items():
        categories[entry["dominant"]].append({
            "pair": key,
            "count": entry[entry["dominant"]],
            "percentage": entry["percentage"],
            "total": entry["total"],
        })
    for rows in categories.values():
        rows.sort(key=lambda r: r["count"], reverse=True)

    return {
        "pairs": pairs_out,
        "timeline": timeline,
        "categories": categories,
        "summary": {"total_draws": len(timeline), "total_pairs": len(pairs_out)},
    }


# ── Tracked pairs ─────────────────────────────────────────────────

def track_pairs(
    draws: Iterable[Draw],
    tracked: Iterable[tuple[int, int]] = DEFAULT_TRACKED_PAIRS,
) -> dict[str, Any]:
    """
    Count draws whose two lowest sorted digits equal each tracked pair, with
    the completing combinations seen and their dates.
    """
    draws = list(draws)
    tracked = [tuple(sorted(t)) for t in tracked]
    buckets = {t: {"count": 0, "combinations": {}, "dates": []} for t in tracked}

    for draw in draws:
        lead = draw.sorted_digits[:2]
        bucket = buckets.get(lead)
        if bucket is None:
            continue
        bucket["count"] += 1
        combo = draw.key
        date = draw.date or f"{draw.month} {draw.index}, {draw.year}"
        seen = bucket["combinations"].setdefault(
            combo, {"combo": combo, "numbers": list(draw.sorted_digits), "count": 0, "dates": []}
        )
        seen["count"] += 1
        seen["dates"].append(date)
        bucket["dates"].append({"date": date, "combination": combo, "index": draw.index})

    total = len(draws)
    rows = []
    for (first, second), bucket in buckets.items():
        combos = sorted(bucket["combinations"].values(), key=lambda c: c["count"], reverse=True)
        rows.append({
            "pair": format_pair_key(first, second),
            "first": first,
            "second": second,
            "possible_combinations": possible_completions(first, second),
            "count": bucket["count"],
            "percentage": round(pct(bucket["count"], total), 2),
            "combinations": combos,
            "total_unique_combinations": len(combos),
            "draw_dates": sorted(bucket["dates"], key=lambda d: d["index"] if d["index"] is not None else -1, reverse=True),
        })
    rows.sort(key=lambda r: r["count"], reverse=True)

    occurrences = sum(r["count"] for r in rows)
    across: dict[str, dict[str, Any]] = {}
    for row in rows:
        for combo in row["combinations"]:
            entry = across.setdefault(combo["combo"], {"combo": combo["combo"], "total_count": 0, "pairs": []})
            entry["total_count"] += combo["count"]
            entry["pairs"].append(row["pair"])

    def headline(row: dict[str, Any] | None) -> dict[str, Any] | None:
        if row is None:
            return None
        return {"pair": row["pair"], "count": row["count"], "percentage": row["percentage"]}

    log.info(f"Tracked {len(rows)} pairs over {total} draws: {occurrences} occurrences")
    return {
        "total_draws": total,
        "pairs": rows,
        "summary": {
            "total_pair_occurrences": occurrences,
            "average_occurrence_per_pair": round(occurrences / len(rows), 1) if rows else 0.0,
            "coverage_percentage": round(pct(occurrences, total), 2),
            "most_active_pair": headline(rows[0] if rows else None),
            "least_active_pair": headline(rows[-1] if rows else None),
            "top_combinations": sorted(across.values(), key=lambda c: c["total_count"], reverse=True)[:5],
        },
    }
