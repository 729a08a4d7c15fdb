"""tests/test_reports.py"""
import pytest

from pick3.analysis.draw_report import analyze_draws, annotate_draw
from pick3.analysis.history_check import check_history
from pick3.analysis.query import query_combinations, query_pairs
from pick3.core.draw import Draw
from pick3.rules.validator import RuleSet


def make_draw(digits, index, fireball=None, month="Apr", year="2024"):
    return Draw.from_digits(digits, index=index, fireball=fireball, month=month, year=year, date=f"2024-04-{index:02d}")


class TestDrawReport:
    def setup_method(self):
        self.draws = [
            make_draw([8, 2, 1], 5),             # BBA diff 1: pass
            make_draw([1, 4, 8], 4, fireball=2), # BBA diff 3: fail, rescued by fireball
            make_draw([5, 6, 8], 3),             # AAA
            make_draw([2, 6, 8], 2),             # BAA diff 2: pass
            make_draw([3, 3, 8], 1),             # repeat
        ]

    def test_combo_summary(self):
        report = analyze_draws(self.draws, RuleSet.COMBO)
        assert report["summary"] == {
            "total_draws_fetched": 5,
            "valid_draws_processed": 5,
            "unique_number_draws": 4,
        }
        assert report["patterns"]["counts"] == {"BBB": 0, "BBA": 2, "BAA": 1, "AAA": 1}
        assert report["patterns"]["percentages"]["BBA"] == 40.0
        assert report["validation"]["main_draw_passes"] == 2
        assert report["validation"]["fireball_passes"] == 1

    def test_difference_histogram(self):
        report = analyze_draws(self.draws, RuleSet.COMBO)
        bba = report["differences"]["BBA"]
        assert bba["distribution"] == {1: 1, 3: 1}
        assert bba["pass_count"] == 1

    def test_fireball_totals(self):
        fb = analyze_draws(self.draws, RuleSet.COMBO)["fireball_analysis"]
        assert fb["draws_with_fireball"] == 1
        assert fb["total_substitutions_checked"] == 3
        assert fb["total_substitutions_passed"] == 2
        assert fb["pattern_breakdown"]["BBA"] == 2

    def test_cascade_buckets(self):
        cascade = analyze_draws(self.draws, RuleSet.COMBO)["cascade"]
        assert sum(cascade["overall"].values()) == 5
        assert sum(cascade["passing_only"].values()) == 2
        assert sum(sum(d.values()) for d in cascade["by_pattern"].values()) == 5

    def test_straight_skips_draws_without_original(self):
        draws = self.draws + [Draw(sorted_digits=(1, 2, 3), index=0)]
        report = analyze_draws(draws, RuleSet.STRAIGHT)
        assert report["summary"]["total_draws_fetched"] == 6
        assert report["summary"]["valid_draws_processed"] == 5
        assert set(report["patterns"]["counts"]) == {"BBB", "BBA", "BAB", "ABB", "BAA", "ABA", "AAB", "AAA"}
        assert "by_ratio" in report["patterns"]

    def test_fetched_count_includes_unparsed_records(self):
        report = analyze_draws(self.draws, RuleSet.COMBO, fetched=7)
        assert report["summary"]["total_draws_fetched"] == 7
        assert report["summary"]["valid_draws_processed"] == 5

    def test_range_spread(self):
        report = analyze_draws(self.draws, RuleSet.RANGE_SPREAD)
        # 1-2-8, 1-4-8 and 2-6-8 have a low and a high digit
        assert report["validation"]["main_draw_passes"] == 3

    def test_empty(self):
        report = analyze_draws([], RuleSet.COMBO)
        assert report["validation"]["main_draw_pass_percentage"] == 0.0
        assert report["summary"]["valid_draws_processed"] == 0

    def test_annotation(self):
        note = annotate_draw(self.draws[1])
        assert note["is_valid_combo"] is False
        assert note["combo_reason"] == "BBA difference 3 > 2"
        assert note["has_valid_fireball"] is True
        assert note["ordered_pattern"] == "BBA"
        assert note["cascade_number"] == 1


class TestHistoryCheck:
    def setup_method(self):
        self.draws = [
            make_draw([1, 2, 3], 4),
            make_draw([7, 2, 1], 3, month="Mar"),
            make_draw([1, 5, 6], 2),
            make_draw([4, 5, 6], 1),
        ]

    def test_two_digit_prefix(self):
        result = check_history(self.draws, [2, 1])
        assert result["numbers"] == [1, 2]
        assert result["pattern"] == "BB"
        stats = result["statistics"]
        assert stats["first_number"]["count"] == 3
        assert stats["first_two"]["count"] == 2
        assert [c["number"] for c in stats["first_two"]["completions"]] == [3, 7]
        assert stats["full_combination"] is None
        assert [m["index"] for m in result["full_matches"]] == [4, 3]
        assert [m["index"] for m in result["partial_matches"]] == [2]
        assert result["monthly_breakdown"]["Apr-2024"] == {"partial": 1, "full": 1, "dates": ["2024-04-04"]}

    def test_full_combination(self):
        stats = check_history(self.draws, [3, 2, 1])["statistics"]["full_combination"]
        assert stats["count"] == 1
        assert stats["last_seen"] == "2024-04-04"
        assert stats["is_hot"] is True
        assert stats["is_cold"] is False

    def test_never_seen(self):
        result = check_history(self.draws, [9])
        assert result["statistics"]["first_number"]["count"] == 0
        assert result["recent_occurrences"] == []

    @pytest.mark.parametrize("bad", [[], [1, 2, 3, 4], [10], [1, "2"]])
    def test_invalid_request(self, bad):
        with pytest.raises(ValueError):
            check_history(self.draws, bad)


COMBINATION_ROWS = [
    {"id": 1, "pattern": "BBA", "cascade_number": 3,
     "frequency": {"count": 4, "category": "occasional", "last_occurrence_index": 10}},
    {"id": 2, "pattern": "BAA", "cascade_number": 1,
     "frequency": {"count": 0, "category": "never", "last_occurrence_index": None}},
    {"id": 3, "pattern": "BBA", "cascade_number": 0,
     "frequency": {"count": 9, "category": "frequent", "last_occurrence_index": 12}},
]

PAIR_ROWS = [
    {"pair": "0-1", "first": 0, "second": 1, "frequency": 5, "percentage": 5.0, "possible_completions": 9, "category": "high"},
    {"pair": "1-2", "first": 1, "second": 2, "frequency": 1, "percentage": 1.0, "possible_completions": 8, "category": "low"},
    {"pair": "0-9", "first": 0, "second": 9, "frequency": 3, "percentage": 3.0, "possible_completions": 1, "category": "medium"},
]


class TestQuery:
    def test_sort_combinations(self):
        rows = query_combinations(COMBINATION_ROWS, sort_by="frequency", order="desc")
        assert [r["id"] for r in rows] == [3, 1, 2]
        rows = query_combinations(COMBINATION_ROWS, sort_by="last_occurrence", order="asc")
        assert [r["id"] for r in rows] == [2, 1, 3]

    def test_filter_and_limit(self):
        rows = query_combinations(COMBINATION_ROWS, sort_by="cascade", pattern="BBA", limit=1)
        assert [r["id"] for r in rows] == [3]
        assert query_combinations(COMBINATION_ROWS, category="never")[0]["id"] == 2

    def test_pairs(self):
        assert [r["pair"] for r in query_pairs(PAIR_ROWS)] == ["0-1", "0-9", "1-2"]
        assert [r["pair"] for r in query_pairs(PAIR_ROWS, sort_by="pair", order="asc")] == ["0-1", "0-9", "1-2"]
        assert [r["pair"] for r in query_pairs(PAIR_ROWS, sort_by="possible_completions", order="asc")] == ["0-9", "1-2", "0-1"]
        assert query_pairs(PAIR_ROWS, category="medium")[0]["pair"] == "0-9"

    def test_unknown_sort_key(self):
        with pytest.raises(ValueError):
            query_combinations(COMBINATION_ROWS, sort_by="sum")
        with pytest.raises(ValueError):
            query_pairs(PAIR_ROWS, sort_by="id")
        with pytest.raises(ValueError):
            query_pairs(PAIR_ROWS, order="up")

    def test_input_untouched(self):
        query_combinations(COMBINATION_ROWS, sort_by="frequency", order="desc")
        assert [r["id"] for r in COMBINATION_ROWS] == [1, 2, 3]
