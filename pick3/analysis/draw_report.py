"""
pick3/analysis/draw_report.py
Validator summary over a draw corpus for one rule set: pattern counts,
same-category spread histograms, main / fireball pass rates and cascade
distributions (overall, per pattern, passing draws only).
"""
from __future__ import annotations

from collections import Counter, defaultdict
from typing import Any, Iterable

from pick3.core.cascade import cascade, empty_distribution
from pick3.core.draw import Draw
from pick3.core.patterns import MIXED_ORDERED_PATTERNS, ORDERED_PATTERNS, UNORDERED_PATTERNS
from pick3.rules.fireball import analyze_draw_fireball
from pick3.rules.validator import DEFAULT_CONFIG, RuleSet, category_difference, pattern_for, validate
from pick3.utils.config import AnalysisConfig
from pick3.utils.logger import get_logger

log = get_logger("analysis.draw_report")


def pct(count: int | float, total: int | float) -> float:
    return (count / total) * 100 if total > 0 else 0.0


def _patterns_for(rule_set: RuleSet) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """(patterns counted, patterns with a spread histogram)"""
    if rule_set.is_ordered:
        return ORDERED_PATTERNS, MIXED_ORDERED_PATTERNS
    return UNORDERED_PATTERNS, ("BBA", "BAA")


def analyze_draws(
    draws: Iterable[Draw],
    rule_set: RuleSet = RuleSet.COMBO,
    config: AnalysisConfig = DEFAULT_CONFIG,
    fetched: int | None = None,
) -> dict[str, Any]:
    """
    Single pass over draws (newest first). Draws without the digit vector the
    rule set needs (original order for STRAIGHT) are skipped with a warning.
    `fetched` is the raw record count before parsing; it defaults to the
    number of draws passed in.
    """
    patterns, spread_patterns = _patterns_for(rule_set)

    total = 0
    valid = 0
    unique = 0
    pattern_counts = {p: 0 for p in patterns}
    spreads: dict[str, Counter] = {p: Counter() for p in spread_patterns}
    spread_passes = {p: 0 for p in spread_patterns}
    passed_main = 0
    passed_fireball = 0
    draws_with_fireball = 0
    substitutions_passed = 0
    fireball_patterns = {p: 0 for p in (rule_set.allowed_patterns or patterns)}
    cascade_all = empty_distribution()
    cascade_passing = empty_distribution()
    cascade_by_pattern: dict[str, dict[int, int]] = defaultdict(empty_distribution)

    for draw in draws:
        total += 1
        digits = draw.original_digits if rule_set.is_ordered else draw.sorted_digits
        if digits is None:
            log.warning(f"Skipping draw {draw.index}: no {'original' if rule_set.is_ordered else 'sorted'} digits")
            continue
        valid += 1

        pattern = pattern_for(digits, rule_set, config)
        digest = cascade(digits)
        cascade_all[digest] += 1
        cascade_by_pattern[pattern][digest] += 1

        if len(set(digits)) == 3:
            unique += 1
            pattern_counts[pattern] += 1
            if pattern in spreads:
                _, _, diff = category_difference(digits, config)
                spreads[pattern][diff] += 1
                if diff <= config.max_allowed_diff:
                    spread_passes[pattern] += 1

        if validate(digits, rule_set, config).valid:
            passed_main += 1
            cascade_passing[digest] += 1

        if draw.fireball is not None:
            draws_with_fireball += 1
            fireball = analyze_draw_fireball(draw, rule_set, config)
            if fireball.has_valid_fireball:
                passed_fireball += 1
                substitutions_passed += fireball.substitutions_passed
                for detail in fireball.details:
                    fireball_patterns[detail.pattern] = fireball_patterns.get(detail.pattern, 0) + 1

    # unordered percentages are over every processed draw, ordered over unique-digit draws
    pattern_base = unique if rule_set.is_ordered else valid

    report: dict[str, Any] = {
        "rule_set": rule_set.value,
        "summary": {
            "total_draws_fetched": total if fetched is None else fetched,
            "valid_draws_processed": valid,
            "unique_number_draws": unique,
        },
        "patterns": {
            "counts": pattern_counts,
            "percentages": {p: pct(c, pattern_base) for p, c in pattern_counts.items()},
        },
        "differences": {
            p: {
                "distribution": dict(sorted(spreads[p].items())),
                "pass_count": spread_passes[p],
                "pass_percentage": pct(spread_passes[p], pattern_counts[p] if rule_set.is_ordered else valid),
            }
            for p in spread_patterns
        },
        "validation": {
            "main_draw_passes": passed_main,
            "main_draw_pass_percentage": pct(passed_main, valid),
            "fireball_passes": passed_fireball,
            "fireball_pass_percentage": pct(passed_fireball, valid),
        },
        "fireball_analysis": {
            "draws_with_fireball": draws_with_fireball,
            "draws_with_valid_fireball": passed_fireball,
            "total_substitutions_checked": draws_with_fireball * 3,
            "total_substitutions_passed": substitutions_passed,
            "pattern_breakdown": fireball_patterns,
        },
        "cascade": {
            "overall": cascade_all,
            "by_pattern": {p: cascade_by_pattern[p] for p in sorted(cascade_by_pattern)},
            "passing_only": cascade_passing,
        },
    }
    if rule_set.is_ordered:
        report["patterns"]["by_ratio"] = {
            "all_same": {p: pattern_counts[p] for p in ("BBB", "AAA")},
            "two_one_mix": {p: pattern_counts[p] for p in MIXED_ORDERED_PATTERNS},
        }

    log.info(
        f"[{rule_set.value}] {valid}/{report['summary']['total_draws_fetched']} draws | main pass {passed_main} "
        f"| fireball pass {passed_fireball}"
    )
    return report


def annotate_draw(draw: Draw, config: AnalysisConfig = DEFAULT_CONFIG) -> dict[str, Any]:
    """Computed flags for one draw; the Draw itself is never modified."""
    combo = validate(draw.sorted_digits, RuleSet.COMBO, config)
    annotation = {
        "index": draw.index,
        "pattern": combo.pattern,
        "cascade_number": cascade(draw.sorted_digits),
        "is_valid_combo": combo.valid,
        "combo_reason": combo.reason,
        "has_valid_fireball": analyze_draw_fireball(draw, RuleSet.COMBO, config).has_valid_fireball,
    }
    if draw.original_digits is not None:
        straight = validate(draw.original_digits, RuleSet.STRAIGHT, config)
        annotation["ordered_pattern"] = straight.pattern
        annotation["is_valid_straight"] = straight.valid
    return annotation
