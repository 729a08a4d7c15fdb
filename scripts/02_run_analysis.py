"""
scripts/02_run_analysis.py
Run one analysis report against Supabase (default) or a local draw export
(--offline, chronological JSONL/CSV) and print a short view of it.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.table import Table

from pick3.analysis.draw_report import analyze_draws
from pick3.analysis.frequency_aggregator import FrequencyAggregator
from pick3.analysis.pair_analyzer import PairTransitionAnalyzer
from pick3.analysis.pair_positions import analyze_pair_positions, filter_by_month, track_pairs
from pick3.analysis.query import COMBINATION_SORT_KEYS, PAIR_SORT_KEYS, query_combinations, query_pairs
from pick3.core.combination import Combination, generate_combinations
from pick3.core.pairs import PairAxis
from pick3.pipeline import analysis_runner
from pick3.pipeline.draw_ingestor import build_draws, load_records
from pick3.rules.validator import RuleSet
from pick3.utils.config import get_analysis_config
from pick3.utils.logger import get_logger

log = get_logger("run_analysis")
console = Console()

RULE_REPORTS = {
    "combo": RuleSet.COMBO,
    "straight": RuleSet.STRAIGHT,
    "range-spread": RuleSet.RANGE_SPREAD,
}
REPORTS = list(RULE_REPORTS) + ["frequency", "pairs", "tracker"]


def run_offline(args, config) -> dict:
    """Same reports as the pipelines, computed from a local file with no DB access."""
    records = load_records(args.offline)
    draws = build_draws(records, depth=config.history_depth)
    draws.reverse()   # newest first
    axis = PairAxis(args.axis)

    if args.report in RULE_REPORTS:
        return {"success": True, "report": analyze_draws(draws, RULE_REPORTS[args.report], config, fetched=len(records))}
    if args.report == "frequency":
        combos = [Combination.from_record(r, config) for r in generate_combinations(config)]
        return {"success": True, **FrequencyAggregator(config, axis).analyze(draws, combos)}
    if args.report == "pairs":
        return {"success": True, **PairTransitionAnalyzer(config, axis).analyze(draws)}
    month_draws = filter_by_month(draws, args.month, args.year)
    return {
        "success": True,
        "month": args.month,
        "year": str(args.year),
        "positions": analyze_pair_positions(month_draws),
        "tracker": track_pairs(month_draws),
    }


def run_online(args, config) -> dict:
    axis = PairAxis(args.axis)
    if args.report in RULE_REPORTS:
        return analysis_runner.run_draw_analysis(RULE_REPORTS[args.report], config)
    if args.report == "frequency":
        return analysis_runner.run_frequency_analysis(axis, config)
    if args.report == "pairs":
        return analysis_runner.run_pair_analysis(axis, config)
    return analysis_runner.run_pair_tracking(args.month, args.year)


# ── Display ───────────────────────────────────────────────────────

def show_combinations(result: dict, args) -> None:
    rows = query_combinations(
        result["results"],
        sort_by=args.sort_by or "frequency",
        order=args.order,
        pattern=args.pattern,
        category=args.category,
        limit=args.limit,
    )
    table = Table(title=f"Combinations (pair axis {result['pair_axis']})")
    for col in ("id", "numbers", "pattern", "cascade", "count", "category", "last index", "pair count"):
        table.add_column(col)
    for r in rows:
        f = r["frequency"]
        table.add_row(
            str(r["id"]), "-".join(map(str, r["numbers"])), r["pattern"], str(r["cascade_number"]),
            str(f["count"]), f["category"], str(f["last_occurrence_index"]), str(r["pair_frequency"]["count"]),
        )
    console.print(table)


def show_pairs(result: dict, args) -> None:
    rows = query_pairs(
        result["pairs"],
        sort_by=args.sort_by or "frequency",
        order=args.order,
        category=args.category,
        limit=args.limit,
    )
    table = Table(title=f"Pairs ({result['axis']})")
    for col in ("pair", "frequency", "%", "completions", "category", "top predecessor"):
        table.add_column(col)
    for r in rows:
        top = r["top_predecessors"][0]["pair"] if r["top_predecessors"] else "-"
        table.add_row(
            r["pair"], str(r["frequency"]), f"{r['percentage']:.2f}",
            str(r["possible_completions"]), r["category"], top,
        )
    console.print(table)


def show_summary(result: dict, args) -> None:
    if args.report in RULE_REPORTS:
        report = result["report"]
        console.print(report["summary"])
        console.print(report["patterns"]["counts"])
        console.print(report["validation"])
    else:
        console.print(result["tracker"]["summary"])


def main():
    parser = argparse.ArgumentParser(description="Pick-3 analysis reports")
    parser.add_argument("--report", choices=REPORTS, required=True)
    parser.add_argument("--axis", choices=[a.value for a in PairAxis], default=PairAxis.FIRST_SECOND.value)
    parser.add_argument("--sort-by", default=None,
                        help=f"combinations: {sorted(COMBINATION_SORT_KEYS)}; pairs: {sorted(PAIR_SORT_KEYS)}")
    parser.add_argument("--order", choices=["asc", "desc"], default="desc")
    parser.add_argument("--pattern", default=None, help="Filter combinations by pattern (BBA, BAA, ...)")
    parser.add_argument("--category", default=None, help="Filter by frequency / pair category")
    parser.add_argument("--limit", type=int, default=20)
    parser.add_argument("--month", default=None, help="Tracker month (Jan..Dec)")
    parser.add_argument("--year", default=None, help="Tracker year")
    parser.add_argument("--offline", default=None, help="Local draw export instead of Supabase")
    parser.add_argument("--out", default=None, help="Write the full report as JSON")
    args = parser.parse_args()

    if args.report == "tracker" and not (args.month and args.year):
        parser.error("--report tracker needs --month and --year")

    config = get_analysis_config()
    result = run_offline(args, config) if args.offline else run_online(args, config)
    if not result["success"]:
        log.error(result["error"])
        sys.exit(1)

    if args.out:
        Path(args.out).parent.mkdir(parents=True, exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(result, f, indent=2, ensure_ascii=False)
        log.info(f"Report written to {args.out}")

    if args.report == "frequency":
        show_combinations(result, args)
    elif args.report == "pairs":
        show_pairs(result, args)
    else:
        show_summary(result, args)


if __name__ == "__main__":
    main()
