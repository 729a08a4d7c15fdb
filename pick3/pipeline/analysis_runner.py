"""
pick3/pipeline/analysis_runner.py
Fetch draws from Supabase, run one analysis, store the report.

Every run computes the whole report before the first write. Storage errors
come back as {"success": False, "error": ...}.
"""
from __future__ import annotations

from pick3.analysis.draw_report import analyze_draws
from pick3.analysis.frequency_aggregator import FrequencyAggregator
from pick3.analysis.pair_analyzer import PairTransitionAnalyzer
from pick3.analysis.pair_positions import DEFAULT_TRACKED_PAIRS, analyze_pair_positions, track_pairs
from pick3.core.combination import Combination
from pick3.core.draw import Draw
from pick3.core.pairs import PairAxis
from pick3.rules.validator import RuleSet
from pick3.utils import supabase_client as db
from pick3.utils.config import AnalysisConfig, get_analysis_config
from pick3.utils.logger import get_logger

log = get_logger("pipeline.runner")


def parse_draws(records: list[dict]) -> list[Draw]:
    draws = [d for d in (Draw.from_record(r) for r in records) if d is not None]
    if len(draws) != len(records):
        log.warning(f"Skipped {len(records) - len(draws)} of {len(records)} draw records")
    return draws


def _failure(msg: str) -> dict:
    log.error(msg)
    return {"success": False, "error": msg}


def run_draw_analysis(rule_set: RuleSet = RuleSet.COMBO, config: AnalysisConfig | None = None) -> dict:
    config = config or get_analysis_config()
    log.info(f"[DRAWS] rule_set={rule_set.value}")
    try:
        records = db.get_draws()
        draws = parse_draws(records)
        report = analyze_draws(draws, rule_set, config, fetched=len(records))
        db.save_report(f"draws_{rule_set.value}", report)
    except Exception as exc:
        return _failure(f"Draw analysis failed: {exc}")
    return {"success": True, "rule_set": rule_set.value, "report": report}


def run_frequency_analysis(
    pair_axis: PairAxis = PairAxis.FIRST_SECOND,
    config: AnalysisConfig | None = None,
) -> dict:
    """
    Recompute every combination's frequency from the full draw history and
    write all 220 rows back in a single upsert.

    The summary report is written first and the combinations upsert last, so a
    failed report write leaves the stored rows untouched. Only the
    combinations upsert is all-or-nothing; a failure there can leave a fresh
    summary next to stale rows until the next run.
    """
    config = config or get_analysis_config()
    log.info(f"[FREQUENCY] pair_axis={pair_axis.value}")
    try:
        records = db.get_combinations()
        combinations = [c for c in (Combination.from_record(r, config) for r in records) if c is not None]
        if not combinations:
            return _failure("No combinations found. Seed the combinations table first.")

        draws = parse_draws(db.get_draws())
        report = FrequencyAggregator(config, pair_axis).analyze(draws, combinations)

        rows = [
            {
                **combo.to_record(),
                "frequency": result["frequency"],
                "pair_frequency": result["pair_frequency"],
            }
            for combo, result in zip(combinations, report["results"])
        ]
        db.save_report(f"frequency_{pair_axis.value}", {
            "pair_axis": report["pair_axis"],
            "summary": report["summary"],
            "monthly_draw_counts": report["monthly_draw_counts"],
        })
        db.upsert_combinations(rows)
    except Exception as exc:
        return _failure(f"Frequency analysis failed: {exc}")

    summary = report["summary"]
    log.info(
        f"[FREQUENCY] {summary['total_combinations']} combinations over "
        f"{summary['total_draws_analyzed']} draws | never drawn {summary['never_drawn']}"
    )
    return {"success": True, **report}


def run_pair_analysis(axis: PairAxis = PairAxis.FIRST_SECOND, config: AnalysisConfig | None = None) -> dict:
    config = config or get_analysis_config()
    log.info(f"[PAIRS] axis={axis.value}")
    try:
        draws = parse_draws(db.get_draws())
        report = PairTransitionAnalyzer(config, axis).analyze(draws)
        db.save_report(f"pairs_{axis.value}", report)
    except Exception as exc:
        return _failure(f"Pair analysis failed: {exc}")
    return {"success": True, **report}


def run_pair_tracking(
    month: str,
    year: str | int,
    tracked: tuple[tuple[int, int], ...] = DEFAULT_TRACKED_PAIRS,
) -> dict:
    if not month or not year:
        return _failure("Missing required parameters: month and year")
    year = str(year)
    log.info(f"[TRACKER] {month} {year}")
    try:
        draws = parse_draws(db.get_draws(month=month, year=year))
        report = {
            "month": month,
            "year": year,
            "positions": analyze_pair_positions(draws),
            "tracker": track_pairs(draws, tracked),
        }
        db.save_report(f"tracker_{month}-{year}", report)
    except Exception as exc:
        return _failure(f"Pair tracking failed: {exc}")
    return {"success": True, **report}
