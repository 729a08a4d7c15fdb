"""
pick3/analysis/pair_analyzer.py
Pair frequency table, pair-to-pair transitions and per-digit activity.

Transitions and activity are read from each draw's embedded previous_sorted
snapshot (most recent first), never from the order of the input sequence.
"""
from __future__ import annotations

from collections import Counter
from typing import Any, Iterable

import numpy as np

from pick3.analysis.draw_report import pct
from pick3.core.draw import Draw
from pick3.core.pairs import PairAxis, all_pair_keys, completions, format_pair_key, pair_key, possible_completions
from pick3.rules.validator import DEFAULT_CONFIG
from pick3.utils.config import AnalysisConfig
from pick3.utils.logger import get_logger

log = get_logger("analysis.pairs")

TRANSITION_ARROW = "→"
TEMPERATURES = ("hot", "warm", "cool", "cold")


def transition_key(prev: str, curr: str) -> str:
    return f"{prev}{TRANSITION_ARROW}{curr}"


def split_transition(key: str) -> tuple[str, str]:
    prev, curr = key.split(TRANSITION_ARROW)
    return prev, curr


class PairTransitionAnalyzer:
    """
    Reduce a draw corpus to the 55-row pair table for one axis.

    activity[d, 0] / activity[d, 1] count how often digit d sat on the axis'
    first / second position across every embedded history entry. recent[n, d]
    marks draw n whose first recent_window history entries contain d on the axis.
    """

    def __init__(self, config: AnalysisConfig = DEFAULT_CONFIG, axis: PairAxis = PairAxis.FIRST_SECOND):
        self.config = config
        self.axis = axis

    def pair_category(self, percentage: float) -> str:
        if percentage >= self.config.pair_high_pct:
            return "high"
        if percentage >= self.config.pair_medium_pct:
            return "medium"
        return "low"

    def temperature(self, percentage: float) -> str:
        if percentage >= self.config.hot_pct:
            return "hot"
        if percentage >= self.config.warm_pct:
            return "warm"
        if percentage >= self.config.cool_pct:
            return "cool"
        return "cold"

    def analyze(self, draws: Iterable[Draw]) -> dict[str, Any]:
        draws = list(draws)
        total = len(draws)
        p, q = self.axis.positions

        pair_counts: Counter = Counter()
        combo_counts: Counter = Counter()
        transitions: Counter = Counter()
        activity = np.zeros((10, 2), dtype=np.int64)
        recent = np.zeros((total, 10), dtype=bool)

        for n, draw in enumerate(draws):
            digits = draw.sorted_digits
            current = pair_key(digits, self.axis)
            pair_counts[current] += 1
            combo_counts[digits] += 1

            for depth, prev in enumerate(draw.previous_sorted):
                activity[prev[p], 0] += 1
                activity[prev[q], 1] += 1
                if depth < self.config.recent_window:
                    recent[n, prev[p]] = True
                    recent[n, prev[q]] = True

            if draw.previous_sorted:
                transitions[transition_key(pair_key(draw.previous_sorted[0], self.axis), current)] += 1

        log.info(
            f"[{self.axis.value}] {total} draws | {len(pair_counts)} pairs seen "
            f"| {len(transitions)} distinct transitions"
        )

        predecessors: dict[str, list[tuple[str, int]]] = {}
        for key, count in transitions.items():
            prev, curr = split_transition(key)
            predecessors.setdefault(curr, []).append((prev, count))

        totals = activity.sum(axis=1)
        pairs = [
            self._pair_row(i, j, pair_counts, combo_counts, predecessors, totals, total)
            for i, j in all_pair_keys()
        ]

        return {
            "axis": self.axis.value,
            "summary": {
                "total_draws_analyzed": total,
                "total_possible_pairs": len(pairs),
                "pairs_found": len(pair_counts),
            },
            "pairs": pairs,
            "transitions": dict(sorted(transitions.items())),
            "insights": self._insights(pairs, transitions, activity, recent.sum(axis=0), total),
        }

    def _pair_row(self, i, j, pair_counts, combo_counts, predecessors, totals, total) -> dict[str, Any]:
        key = format_pair_key(i, j)
        frequency = pair_counts.get(key, 0)
        percentage = pct(frequency, total)

        combos = []
        for numbers in completions(i, j, self.axis):
            count = combo_counts.get(numbers, 0)
            combos.append({
                "combo": "-".join(str(d) for d in numbers),
                "numbers": list(numbers),
                "frequency": count,
                "percentage": pct(count, total),
            })

        # count desc, then pair key for a stable order
        preds = sorted(predecessors.get(key, []), key=lambda t: (-t[1], t[0]))[:3]
        first_activity = int(totals[i])
        second_activity = int(totals[j])

        return {
            "pair": key,
            "first": i,
            "second": j,
            "frequency": frequency,
            "percentage": percentage,
            "possible_completions": possible_completions(i, j, self.axis),
            "category": self.pair_category(percentage),
            "is_repeat": i == j,
            "combinations": combos,
            "top_predecessors": [
                {"pair": prev, "count": count, "percentage": pct(count, frequency)}
                for prev, count in preds
            ],
            "first_digit_activity": first_activity,
            "second_digit_activity": second_activity,
            "activity_score": (first_activity + second_activity) / 2,
        }

    def _insights(self, pairs, transitions, activity, recent_counts, total) -> dict[str, Any]:
        by_frequency = sorted(pairs, key=lambda r: r["frequency"], reverse=True)

        def brief(row: dict[str, Any]) -> dict[str, Any]:
            return {
                "pair": row["pair"],
                "frequency": row["frequency"],
                "percentage": round(row["percentage"], 2),
                "possible_completions": row["possible_completions"],
            }

        by_completions: dict[int, dict[str, Any]] = {}
        for n in sorted({r["possible_completions"] for r in pairs}):
            group = [r for r in pairs if r["possible_completions"] == n]
            by_completions[n] = {
                "avg_frequency": sum(r["frequency"] for r in group) / len(group),
                "pairs": [r["pair"] for r in group],
            }

        digits = []
        for d in range(10):
            recent_pct = pct(int(recent_counts[d]), total)
            digits.append({
                "number": d,
                "total_appearances": int(activity[d].sum()),
                "recent_appearances": int(recent_counts[d]),
                "recent_percentage": round(recent_pct, 1),
                "first_position_count": int(activity[d, 0]),
                "second_position_count": int(activity[d, 1]),
                "temperature": self.temperature(recent_pct),
            })
        digits.sort(key=lambda r: r["recent_appearances"], reverse=True)

        top_transitions = sorted(transitions.items(), key=lambda kv: (-kv[1], kv[0]))[:10]
        return {
            "most_frequent": [brief(r) for r in by_frequency[:10]],
            "least_frequent": [brief(r) for r in reversed(by_frequency[-10:])],
            "category_stats": {
                c: sum(1 for r in pairs if r["category"] == c) for c in ("high", "medium", "low")
            },
            "frequency_by_completions": by_completions,
            "digit_temperatures": {t: [r for r in digits if r["temperature"] == t] for t in TEMPERATURES},
            "transition_insights": {
                "total_transitions": len(transitions),
                "most_common": [
                    {"from": split_transition(k)[0], "to": split_transition(k)[1], "count": c}
                    for k, c in top_transitions
                ],
            },
        }
