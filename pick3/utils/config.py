"""
pick3/utils/config.py
Load env vars and the analysis threshold config JSON.
"""
import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = ROOT / "config"

# ── Supabase ──────────────────────────────────────────────────────
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

# ── Tables ────────────────────────────────────────────────────────
DRAWS_TABLE: str = os.getenv("PICK3_DRAWS_TABLE", "draws")
COMBINATIONS_TABLE: str = os.getenv("PICK3_COMBINATIONS_TABLE", "combinations")
REPORTS_TABLE: str = os.getenv("PICK3_REPORTS_TABLE", "analysis_reports")

PARAMS_FILE: str = os.getenv("PICK3_PARAMS_FILE", "analysis_params.json")

MONTH_NAMES: list[str] = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


# ── Analysis thresholds ───────────────────────────────────────────

@dataclass(frozen=True)
class FrequencyPolicy:
    """Category bounds and hot/cold thresholds for one frequency level."""

    rare_max: int
    occasional_max: int
    hot_ratio: float
    cold_after: int

    def categorize(self, count: int) -> str:
        if count == 0:
            return "never"
        if count <= self.rare_max:
            return "rare"
        if count <= self.occasional_max:
            return "occasional"
        return "frequent"


@dataclass(frozen=True)
class AnalysisConfig:
    category_b_max: int = 4
    max_allowed_diff: int = 2
    history_depth: int = 8
    occurrence_log_limit: int = 10
    recent_window: int = 4
    range_spread_low: tuple[int, ...] = (0, 1, 2)
    range_spread_high: tuple[int, ...] = (7, 8, 9)
    combo_policy: FrequencyPolicy = field(
        default_factory=lambda: FrequencyPolicy(rare_max=1, occasional_max=5, hot_ratio=0.01, cold_after=100)
    )
    pair_policy: FrequencyPolicy = field(
        default_factory=lambda: FrequencyPolicy(rare_max=3, occasional_max=10, hot_ratio=0.02, cold_after=50)
    )
    # pair table category by percentage of draws
    pair_high_pct: float = 4.0
    pair_medium_pct: float = 2.0
    # digit temperature by percentage of draws with the digit in recent history
    hot_pct: float = 50.0
    warm_pct: float = 25.0
    cool_pct: float = 10.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown analysis params: {sorted(unknown)}")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key in ("combo_policy", "pair_policy"):
                kwargs[key] = FrequencyPolicy(**value)
            elif key in ("range_spread_low", "range_spread_high"):
                kwargs[key] = tuple(value)
            else:
                kwargs[key] = value
        return cls(**kwargs)


_analysis_config_cache: dict[str, AnalysisConfig] = {}


def get_analysis_config(path: str | Path | None = None) -> AnalysisConfig:
    """Load and cache the analysis thresholds from config/analysis_params.json."""
    path = Path(path) if path else CONFIG_DIR / PARAMS_FILE
    cache_key = str(path)
    if cache_key in _analysis_config_cache:
        return _analysis_config_cache[cache_key]
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        config = AnalysisConfig.from_dict(json.load(f))
    _analysis_config_cache[cache_key] = config
    return config
