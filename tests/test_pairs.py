"""tests/test_pairs.py"""
import pytest

from pick3.analysis.pair_analyzer import PairTransitionAnalyzer
from pick3.analysis.pair_positions import analyze_pair_positions, filter_by_month, track_pairs
from pick3.core.draw import Draw
from pick3.core.pairs import PairAxis, all_pair_keys, completion_digit, completions, pair_key, possible_completions
from pick3.utils.config import AnalysisConfig


def make_draw(digits, index, prev=(), month="Mar", year="2024"):
    return Draw.from_digits(
        digits, index=index, month=month, year=year,
        previous_sorted=tuple(tuple(sorted(p)) for p in prev),
    )


class TestPairPrimitives:
    def test_55_keys(self):
        keys = all_pair_keys()
        assert len(keys) == 55
        assert sum(1 for i, j in keys if i == j) == 10

    @pytest.mark.parametrize("axis", list(PairAxis))
    def test_closed_form_matches_enumeration(self, axis):
        for i, j in all_pair_keys():
            combos = completions(i, j, axis)
            assert possible_completions(i, j, axis) == len(combos)
            assert all(list(c) == sorted(c) for c in combos)
            assert all(pair_key(c, axis) == f"{i}-{j}" for c in combos)

    def test_closed_form_values(self):
        assert possible_completions(0, 1, PairAxis.FIRST_SECOND) == 9
        assert possible_completions(2, 7, PairAxis.FIRST_THIRD) == 6
        assert possible_completions(3, 8, PairAxis.SECOND_THIRD) == 4

    def test_completion_digit(self):
        assert completion_digit((1, 4, 8), PairAxis.FIRST_SECOND) == 8
        assert completion_digit((1, 4, 8), PairAxis.FIRST_THIRD) == 4
        assert completion_digit((1, 4, 8), PairAxis.SECOND_THIRD) == 1


class TestPairTransitionAnalyzer:
    def setup_method(self):
        # newest first; each draw carries the sorted draws before it
        self.draws = [
            make_draw([5, 2, 1], 3, prev=[(4, 3, 9), (0, 1, 2)]),
            make_draw([9, 4, 3], 2, prev=[(0, 1, 2)]),
            make_draw([2, 1, 0], 1),
        ]
        self.report = PairTransitionAnalyzer(AnalysisConfig()).analyze(self.draws)
        self.pairs = {p["pair"]: p for p in self.report["pairs"]}

    def test_table_covers_every_key(self):
        assert len(self.report["pairs"]) == 55
        assert sum(p["frequency"] for p in self.report["pairs"]) == len(self.draws)
        assert self.report["summary"]["pairs_found"] == 3

    def test_transitions_from_embedded_history(self):
        assert self.report["transitions"] == {"0-1→3-4": 1, "3-4→1-2": 1}
        assert self.pairs["1-2"]["top_predecessors"] == [{"pair": "3-4", "count": 1, "percentage": 100.0}]
        assert self.pairs["0-1"]["top_predecessors"] == []

    def test_categories(self):
        # 1 of 3 draws = 33 %
        assert self.pairs["1-2"]["category"] == "high"
        assert self.pairs["5-6"]["category"] == "low"

    def test_completion_table(self):
        combos = {c["combo"]: c["frequency"] for c in self.pairs["1-2"]["combinations"]}
        assert len(combos) == 8
        assert combos["1-2-5"] == 1
        assert combos["1-2-9"] == 0
        assert self.pairs["1-2"]["possible_completions"] == 8
        assert self.pairs["3-3"]["is_repeat"] is True

    def test_activity(self):
        # history entries: (3,4,9), (0,1,2) on draw 3 and (0,1,2) on draw 2
        row = self.pairs["0-1"]
        assert row["first_digit_activity"] == 2
        assert row["second_digit_activity"] == 2
        assert row["activity_score"] == 2.0
        assert self.pairs["3-9"]["second_digit_activity"] == 0

    def test_temperatures(self):
        temps = self.report["insights"]["digit_temperatures"]
        hot = {r["number"] for r in temps["hot"]}
        warm = {r["number"] for r in temps["warm"]}
        # 0 and 1 appear in the recent history of 2 of 3 draws, 3 and 4 in 1 of 3
        assert hot == {0, 1}
        assert warm == {3, 4}
        assert 9 in {r["number"] for r in temps["cold"]}

    def test_insights(self):
        insights = self.report["insights"]
        assert len(insights["most_frequent"]) == 10
        assert len(insights["least_frequent"]) == 10
        assert sum(insights["category_stats"].values()) == 55
        assert insights["transition_insights"]["total_transitions"] == 2
        assert insights["frequency_by_completions"][10]["pairs"] == ["0-0"]

    def test_other_axis_sum(self):
        for axis in PairAxis:
            report = PairTransitionAnalyzer(AnalysisConfig(), axis).analyze(self.draws)
            assert sum(p["frequency"] for p in report["pairs"]) == len(self.draws)

    def test_empty(self):
        report = PairTransitionAnalyzer().analyze([])
        assert all(p["frequency"] == 0 and p["percentage"] == 0.0 for p in report["pairs"])
        assert report["insights"]["category_stats"]["low"] == 55


class TestPairPositions:
    def setup_method(self):
        self.draws = [
            make_draw([1, 2, 5], 4),
            make_draw([2, 1, 2], 3),
            make_draw([0, 1, 5], 2),
            make_draw([5, 0, 1], 1, month="Feb"),
        ]

    def test_position_counts(self):
        result = analyze_pair_positions(self.draws)
        stats = result["pairs"]["1-2"]
        assert stats["first-second"] == 2
        assert stats["first-third"] == 1
        assert stats["total"] == 3
        assert stats["dominant"] == "first-second"
        assert round(stats["percentage"], 2) == 66.67
        assert result["summary"]["total_draws"] == 4
        assert result["timeline"][0]["pairs"]["1st & 3rd"] == "1-5"

    def test_categories_sorted(self):
        result = analyze_pair_positions(self.draws)
        counts = [r["count"] for r in result["categories"]["first-second"]]
        assert counts == sorted(counts, reverse=True)
        assert {r["pair"] for r in result["categories"]["second-third"]} == {"1-5", "2-5", "2-2"}

    def test_filter_by_month(self):
        assert len(filter_by_month(self.draws, "Mar", 2024)) == 3
        assert len(filter_by_month(self.draws, "Feb", "2024")) == 1

    def test_tracker(self):
        result = track_pairs(self.draws)
        rows = {r["pair"]: r for r in result["pairs"]}
        assert rows["0-1"]["count"] == 2
        assert rows["1-2"]["count"] == 2
        assert rows["2-3"]["count"] == 0
        assert rows["0-1"]["combinations"][0]["combo"] == "0-1-5"
        assert rows["0-1"]["combinations"][0]["count"] == 2
        assert [d["index"] for d in rows["0-1"]["draw_dates"]] == [2, 1]
        summary = result["summary"]
        assert summary["total_pair_occurrences"] == 4
        assert summary["coverage_percentage"] == 100.0
        assert summary["average_occurrence_per_pair"] == 0.8
        assert summary["top_combinations"][0] == {"combo": "0-1-5", "total_count": 2, "pairs": ["0-1"]}

    def test_tracker_requires_lowest_two(self):
        result = track_pairs([make_draw([0, 0, 1], 1)], tracked=[(0, 1)])
        assert result["pairs"][0]["count"] == 0
