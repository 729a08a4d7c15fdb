"""tests/test_draws.py"""
import pytest

from pick3.core.combination import Combination, generate_combinations, generation_stats
from pick3.core.draw import Draw, DrawHistory
from pick3.utils.config import AnalysisConfig, FrequencyPolicy, get_analysis_config
from pick3.utils.logger import get_logger


class TestDrawRecord:
    def test_snake_case_row(self):
        draw = Draw.from_record({
            "id": 17,
            "original_digits": [8, 1, 4],
            "sorted_digits": [1, 4, 8],
            "fireball": 2,
            "draw_index": 40,
            "draw_date": "2024-01-20",
            "draw_month": "Jan",
            "draw_year": 2024,
            "draw_time": "evening",
            "previous_sorted": [[1, 2, 3], [4, 5, 12], [0, 0, 9]],
        })
        assert draw.sorted_digits == (1, 4, 8)
        assert draw.original_digits == (8, 1, 4)
        assert draw.index == 40
        assert draw.year == "2024"
        assert draw.month_key == "Jan-2024"
        assert draw.id == "17"
        # the out-of-range entry is dropped on its own
        assert draw.previous_sorted == ((1, 2, 3), (0, 0, 9))

    def test_legacy_flat_export(self):
        draw = Draw.from_record({
            "originalFirstNumber": 5, "originalSecondNumber": 0, "originalThirdNumber": 3,
            "sortedFirstNumber": 0, "sortedSecondNumber": 3, "sortedThirdNumber": 5,
            "sortedPreviousFirst1": 2, "sortedPreviousSecond1": 2, "sortedPreviousThird1": 7,
            "fireball": 9, "index": 12, "drawDate": "2024-02-01", "drawMonth": "Feb", "year": "2024",
        })
        assert draw.sorted_digits == (0, 3, 5)
        assert draw.previous_sorted == ((2, 2, 7),)
        assert draw.fireball == 9
        assert draw.month == "Feb"

    def test_sorted_only(self):
        draw = Draw.from_record({"sorted_digits": [1, 2, 3]})
        assert draw.original_digits is None
        assert draw.key == "1-2-3"

    @pytest.mark.parametrize("record", [
        {"sorted_digits": [1, 2]},
        {"original_digits": [1, 2, 10]},
        {"original_digits": [3, 1, 2], "sorted_digits": [1, 2, 4]},
        {"sorted_digits": [3, 2, 1]},
        {"draw_index": 3},
        "1-2-3",
    ])
    def test_malformed_skipped(self, record):
        assert Draw.from_record(record) is None

    def test_non_digit_fireball_and_index(self):
        draw = Draw.from_record({"original_digits": [1, 2, 3], "fireball": "x", "draw_index": "7"})
        assert draw.fireball is None
        assert draw.index is None

    def test_round_trip_row_shape(self):
        draw = Draw.from_digits([9, 0, 4], index=3, previous_sorted=((1, 2, 3),))
        row = draw.to_record()
        assert row["sorted_digits"] == [0, 4, 9]
        assert row["previous_sorted"] == [[1, 2, 3]]
        assert Draw.from_record(row) == draw

    def test_from_digits_rejects_bad_input(self):
        with pytest.raises(ValueError):
            Draw.from_digits([1, 2, 3, 4])


class TestDrawHistory:
    def test_newest_first_and_bounded(self):
        history = DrawHistory(depth=3)
        for n in range(5):
            history.push(Draw.from_digits([n, n, n]))
        original, sorted_ = history.snapshot()
        assert len(history) == 3
        assert sorted_ == ((4, 4, 4), (3, 3, 3), (2, 2, 2))
        assert original == sorted_

    def test_clear(self):
        history = DrawHistory()
        history.push(Draw.from_digits([1, 2, 3]))
        history.clear()
        assert history.snapshot() == ((), ())


class TestCombinations:
    def setup_method(self):
        self.rows = generate_combinations()

    def test_220_sorted_with_ids(self):
        assert len(self.rows) == 220
        assert [r["id"] for r in self.rows] == list(range(1, 221))
        assert self.rows[0]["numbers"] == [0, 0, 0]
        assert self.rows[-1]["numbers"] == [9, 9, 9]
        assert all(r["numbers"] == sorted(r["numbers"]) for r in self.rows)

    def test_stats(self):
        stats = generation_stats(self.rows)
        assert stats["total_combinations"] == 220
        assert sum(stats["patterns"].values()) == 220
        assert sum(stats["cascade_distribution"].values()) == 220
        assert stats["unique_number_combinations"] == 120
        assert stats["valid_combinations"] == stats["valid_bba"] + stats["valid_baa"]

    def test_repeat_tolerated_in_generator(self):
        row = next(r for r in self.rows if r["numbers"] == [1, 1, 5])
        assert row["is_valid"] is True
        assert row["has_unique_numbers"] is False

    def test_from_record_fields(self):
        assert Combination.from_record({"id": 3, "sorted_numbers": [4, 1, 8]}).numbers == (1, 4, 8)
        assert Combination.from_record({"id": 4, "sortedNumbers": [0, 1, 2]}).pattern == "BBB"
        assert Combination.from_record({"id": 5, "numbers": [1, 2]}) is None


class TestConfig:
    def test_shipped_file_matches_defaults(self):
        assert get_analysis_config() == AnalysisConfig()

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            AnalysisConfig.from_dict({"max_allowed_diff": 2, "typo_key": 1})

    def test_nested_policy(self):
        config = AnalysisConfig.from_dict({"pair_policy": {"rare_max": 1, "occasional_max": 2, "hot_ratio": 0.5, "cold_after": 3}})
        assert config.pair_policy == FrequencyPolicy(1, 2, 0.5, 3)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_analysis_config(tmp_path / "nope.json")

    def test_policy_categories(self):
        policy = AnalysisConfig().combo_policy
        assert [policy.categorize(n) for n in (0, 1, 5, 6)] == ["never", "rare", "occasional", "frequent"]


class TestLogger:
    def test_module_loggers_share_root_handlers(self):
        pairs = get_logger("analysis.pairs")
        runner = get_logger("pipeline.runner")
        root = get_logger()

        assert pairs.name == "pick3.analysis.pairs"
        assert pairs.getEffectiveLevel() == root.level
        assert pairs.handlers == [] and runner.handlers == []
        assert len(root.handlers) == 2
        assert root.propagate is False

    def test_same_name_same_logger(self):
        assert get_logger("core.draw") is get_logger("core.draw")
