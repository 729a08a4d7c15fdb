"""
pick3/analysis/frequency_aggregator.py
Combination frequency analysis over the full draw history.

Each run recomputes every frequency from the draws alone (stored frequency
records are never read), so running twice on the same corpus gives identical
output. Recency uses the draw index: days_since_last_occurrence is
total_valid_draws - index of the most recent occurrence, a draw-count proxy
rather than calendar days.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from pick3.analysis.draw_report import annotate_draw, pct
from pick3.core.combination import Combination
from pick3.core.draw import Draw
from pick3.core.pairs import PairAxis, completion_digit, pair_key
from pick3.rules.validator import DEFAULT_CONFIG
from pick3.utils.config import AnalysisConfig, FrequencyPolicy
from pick3.utils.logger import get_logger

log = get_logger("analysis.frequency")

CATEGORIES = ("never", "rare", "occasional", "frequent")


@dataclass(frozen=True)
class Occurrence:
    date: str | None
    month: str | None
    year: str | None
    index: int | None
    time: str | None
    completion: int | None = None

    @classmethod
    def of(cls, draw: Draw, completion: int | None = None) -> "Occurrence":
        return cls(draw.date, draw.month, draw.year, draw.index, draw.time, completion)

    def to_dict(self) -> dict[str, Any]:
        out = {
            "date": self.date,
            "month": self.month,
            "year": self.year,
            "index": self.index,
            "time": self.time,
        }
        if self.completion is not None:
            out["completion"] = self.completion
        return out


@dataclass
class Tally:
    count: int = 0
    occurrences: list[Occurrence] = field(default_factory=list)
    completions: set[int] = field(default_factory=set)

    def add(self, occurrence: Occurrence) -> None:
        self.count += 1
        self.occurrences.append(occurrence)
        if occurrence.completion is not None:
            self.completions.add(occurrence.completion)


@dataclass
class Frequency:
    count: int
    percentage: float
    occurrences: list[Occurrence]
    last_occurrence: str | None
    last_occurrence_index: int | None
    days_since_last_occurrence: int | None
    monthly_breakdown: dict[str, int]
    category: str
    is_hot: bool
    is_cold: bool
    unique_completions: int | None = None
    relative_to_full: float | None = None

    def to_dict(self) -> dict[str, Any]:
        out = {
            "count": self.count,
            "percentage": self.percentage,
            "occurrences": [o.to_dict() for o in self.occurrences],
            "last_occurrence": self.last_occurrence,
            "last_occurrence_index": self.last_occurrence_index,
            "days_since_last_occurrence": self.days_since_last_occurrence,
            "monthly_breakdown": self.monthly_breakdown,
            "category": self.category,
            "is_hot": self.is_hot,
            "is_cold": self.is_cold,
        }
        if self.unique_completions is not None:
            out["unique_completions"] = self.unique_completions
            out["relative_to_full"] = self.relative_to_full
        return out


def _recency_key(occurrence: Occurrence) -> int:
    return occurrence.index if occurrence.index is not None else -1


def build_frequency(
    tally: Tally | None,
    total_valid_draws: int,
    policy: FrequencyPolicy,
    log_limit: int = 10,
) -> Frequency:
    tally = tally or Tally()
    # most recent first; ties keep input order
    ordered = sorted(tally.occurrences, key=_recency_key, reverse=True)

    last = ordered[0] if ordered else None
    days_since = None
    if last is not None:
        # index 0 is the unset value in stored draws, same as a missing index
        days_since = total_valid_draws - (last.index or total_valid_draws)

    monthly: dict[str, int] = {}
    for occ in ordered:
        if occ.month and occ.year:
            key = f"{occ.month}-{occ.year}"
            monthly[key] = monthly.get(key, 0) + 1

    return Frequency(
        count=tally.count,
        percentage=pct(tally.count, total_valid_draws),
        occurrences=ordered[:log_limit],
        last_occurrence=last.date if last else None,
        last_occurrence_index=last.index if last else None,
        days_since_last_occurrence=days_since,
        monthly_breakdown=monthly,
        category=policy.categorize(tally.count),
        is_hot=tally.count > total_valid_draws * policy.hot_ratio,
        is_cold=days_since is not None and days_since > policy.cold_after,
    )


@dataclass
class CorpusTally:
    total_valid_draws: int = 0
    full: dict[str, Tally] = field(default_factory=dict)
    pairs: dict[str, Tally] = field(default_factory=dict)
    monthly_draw_counts: dict[str, int] = field(default_factory=dict)


class FrequencyAggregator:
    """Count combinations and pair keys across draws and score every combination."""

    def __init__(self, config: AnalysisConfig = DEFAULT_CONFIG, pair_axis: PairAxis = PairAxis.FIRST_SECOND):
        self.config = config
        self.pair_axis = pair_axis

    def tally(self, draws: Iterable[Draw]) -> CorpusTally:
        corpus = CorpusTally()
        for draw in draws:
            digits = draw.sorted_digits
            corpus.full.setdefault(draw.key, Tally()).add(Occurrence.of(draw))
            corpus.pairs.setdefault(pair_key(digits, self.pair_axis), Tally()).add(
                Occurrence.of(draw, completion_digit(digits, self.pair_axis))
            )
            if draw.month_key:
                corpus.monthly_draw_counts[draw.month_key] = corpus.monthly_draw_counts.get(draw.month_key, 0) + 1
            corpus.total_valid_draws += 1
        return corpus

    def score(self, combo: Combination, corpus: CorpusTally) -> dict[str, Any]:
        total = corpus.total_valid_draws
        limit = self.config.occurrence_log_limit
        full_tally = corpus.full.get(combo.key)
        pair_tally = corpus.pairs.get(pair_key(combo.numbers, self.pair_axis))

        frequency = build_frequency(full_tally, total, self.config.combo_policy, limit)
        pair_frequency = build_frequency(pair_tally, total, self.config.pair_policy, limit)
        pair_frequency.unique_completions = len(pair_tally.completions) if pair_tally else 0
        pair_frequency.relative_to_full = pair_frequency.count / frequency.count if frequency.count > 0 else 0.0

        return {
            "id": combo.id,
            "numbers": list(combo.numbers),
            "pattern": combo.pattern,
            "cascade_number": combo.cascade_number,
            "frequency": frequency.to_dict(),
            "pair_frequency": pair_frequency.to_dict(),
        }

    def analyze(self, draws: Iterable[Draw], combinations: Iterable[Combination]) -> dict[str, Any]:
        draws = list(draws)
        combinations = list(combinations)
        corpus = self.tally(draws)
        log.info(
            f"Analyzing {len(combinations)} combinations against {corpus.total_valid_draws} draws "
            f"({len(corpus.full)} unique combinations, {len(corpus.pairs)} unique pairs)"
        )

        results = [self.score(combo, corpus) for combo in combinations]
        return {
            "pair_axis": self.pair_axis.value,
            "summary": self.summarize(results, corpus),
            "results": results,
            "monthly_draw_counts": dict(sorted(corpus.monthly_draw_counts.items())),
            "draw_annotations": [annotate_draw(d, self.config) for d in draws],
        }

    def summarize(self, results: list[dict[str, Any]], corpus: CorpusTally) -> dict[str, Any]:
        by_count = sorted(results, key=lambda r: r["frequency"]["count"], reverse=True)
        by_pair = sorted(results, key=lambda r: r["pair_frequency"]["count"], reverse=True)
        return {
            "total_combinations": len(results),
            "total_draws_analyzed": corpus.total_valid_draws,
            "unique_drawn_combinations": len(corpus.full),
            "frequency_distribution": _distribution(results, "frequency"),
            "most_frequent": [
                {
                    "numbers": r["numbers"],
                    "count": r["frequency"]["count"],
                    "percentage": round(r["frequency"]["percentage"], 2),
                }
                for r in by_count[:10]
            ],
            "never_drawn": sum(1 for r in results if r["frequency"]["count"] == 0),
            "hot_combinations": sum(1 for r in results if r["frequency"]["is_hot"]),
            "cold_combinations": sum(1 for r in results if r["frequency"]["is_cold"]),
            "pair_stats": {
                "total_unique_pairs": len(corpus.pairs),
                "frequency_distribution": _distribution(results, "pair_frequency"),
                "most_frequent_pairs": [
                    {
                        "pair": pair_key(r["numbers"], self.pair_axis),
                        "count": r["pair_frequency"]["count"],
                        "percentage": round(r["pair_frequency"]["percentage"], 2),
                        "unique_completions": r["pair_frequency"]["unique_completions"],
                    }
                    for r in by_pair[:10]
                ],
                "hot_pairs": sum(1 for r in results if r["pair_frequency"]["is_hot"]),
                "cold_pairs": sum(1 for r in results if r["pair_frequency"]["is_cold"]),
            },
        }


def _distribution(results: list[dict[str, Any]], field_name: str) -> dict[str, int]:
    counts = {c: 0 for c in CATEGORIES}
    for r in results:
        counts[r[field_name]["category"]] += 1
    return counts
