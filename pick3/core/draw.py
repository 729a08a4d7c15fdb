"""
pick3/core/draw.py
Draw record model and the bounded history buffer used at ingestion.

A Draw carries point-in-time snapshots of the (up to) 8 draws that preceded it,
most recent first. Snapshots are taken once when the draw is ingested and are
never rebuilt from storage afterwards.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterable

from pick3.core.digits import is_digit, is_digit_vector
from pick3.utils.logger import get_logger

log = get_logger("core.draw")

HISTORY_DEPTH = 8

Digits = tuple[int, int, int]

_ORDINALS = ("First", "Second", "Third")


@dataclass(frozen=True)
class Draw:
    sorted_digits: Digits
    original_digits: Digits | None = None
    fireball: int | None = None
    index: int | None = None
    date: str | None = None
    month: str | None = None
    year: str | None = None
    time: str | None = None
    previous_original: tuple[Digits, ...] = field(default_factory=tuple)
    previous_sorted: tuple[Digits, ...] = field(default_factory=tuple)
    id: str | None = None

    @property
    def month_key(self) -> str | None:
        if self.month and self.year:
            return f"{self.month}-{self.year}"
        return None

    @property
    def key(self) -> str:
        return "-".join(str(d) for d in self.sorted_digits)

    @classmethod
    def from_digits(cls, original: Iterable[int], **kwargs: Any) -> "Draw":
        """Build a draw from its digits in drawn order. Raises ValueError on bad digits."""
        original = tuple(original)
        if not is_digit_vector(original):
            raise ValueError(f"A draw needs exactly three digits 0-9, got {original!r}")
        return cls(sorted_digits=tuple(sorted(original)), original_digits=original, **kwargs)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Draw | None":
        """
        Parse a stored draw row. Accepts the snake_case table row and the legacy
        flat export (originalFirstNumber ... sortedPreviousThird8).
        Returns None (and logs a warning) when the record is malformed.
        """
        if not isinstance(record, dict):
            log.warning(f"Skipping draw: not a mapping ({type(record).__name__})")
            return None

        ref = record.get("id") or record.get("draw_index") or record.get("index")
        if "sorted_digits" in record or "original_digits" in record:
            original = _as_vector(record.get("original_digits"))
            sorted_ = _as_vector(record.get("sorted_digits"))
            prev_original = _history(record.get("previous_original"))
            prev_sorted = _history(record.get("previous_sorted"))
            meta = {
                "index": record.get("draw_index", record.get("index")),
                "date": record.get("draw_date"),
                "month": record.get("draw_month"),
                "year": record.get("draw_year"),
                "time": record.get("draw_time"),
            }
        else:
            original = _flat_vector(record, "original{}Number")
            sorted_ = _flat_vector(record, "sorted{}Number")
            prev_original = _flat_history(record, "originalPrevious{}{}")
            prev_sorted = _flat_history(record, "sortedPrevious{}{}")
            meta = {
                "index": record.get("index"),
                "date": record.get("drawDate"),
                "month": record.get("drawMonth"),
                "year": record.get("year"),
                "time": record.get("time"),
            }

        if original is None and sorted_ is None:
            log.warning(f"Skipping draw {ref}: missing or invalid digit fields")
            return None
        if original is not None:
            derived = tuple(sorted(original))
            if sorted_ is not None and sorted_ != derived:
                log.warning(f"Skipping draw {ref}: sorted digits {sorted_} do not match {original}")
                return None
            sorted_ = derived
        elif list(sorted_) != sorted(sorted_):
            log.warning(f"Skipping draw {ref}: sorted digits {sorted_} are not ascending")
            return None

        index = meta["index"]
        if index is not None and (isinstance(index, bool) or not isinstance(index, int)):
            log.warning(f"Draw {ref}: non-integer index {index!r} ignored")
            index = None

        fireball = record.get("fireball")
        year = meta["year"]
        return cls(
            sorted_digits=sorted_,
            original_digits=original,
            fireball=fireball if is_digit(fireball) else None,
            index=index,
            date=meta["date"],
            month=meta["month"],
            year=str(year) if year is not None else None,
            time=meta["time"],
            previous_original=prev_original,
            previous_sorted=prev_sorted,
            id=str(record["id"]) if record.get("id") is not None else None,
        )

    def to_record(self) -> dict[str, Any]:
        """Snake_case row for the draws table."""
        return {
            "original_digits": list(self.original_digits) if self.original_digits else None,
            "sorted_digits": list(self.sorted_digits),
            "fireball": self.fireball,
            "draw_index": self.index,
            "draw_date": self.date,
            "draw_month": self.month,
            "draw_year": self.year,
            "draw_time": self.time,
            "previous_original": [list(p) for p in self.previous_original],
            "previous_sorted": [list(p) for p in self.previous_sorted],
        }


class DrawHistory:
    """Ring buffer of the most recent draws seen during ingestion."""

    def __init__(self, depth: int = HISTORY_DEPTH):
        self.depth = depth
        self._original: deque[Digits] = deque(maxlen=depth)
        self._sorted: deque[Digits] = deque(maxlen=depth)

    def __len__(self) -> int:
        return len(self._sorted)

    def push(self, draw: Draw) -> None:
        # appendleft keeps the newest entry at position 0
        if draw.original_digits is not None:
            self._original.appendleft(draw.original_digits)
        self._sorted.appendleft(draw.sorted_digits)

    def snapshot(self) -> tuple[tuple[Digits, ...], tuple[Digits, ...]]:
        return tuple(self._original), tuple(self._sorted)

    def clear(self) -> None:
        self._original.clear()
        self._sorted.clear()


# ── Record helpers ────────────────────────────────────────────────

def _as_vector(value: Any) -> Digits | None:
    if isinstance(value, (list, tuple)) and is_digit_vector(list(value)):
        return tuple(int(v) for v in value)
    return None


def _history(value: Any) -> tuple[Digits, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    entries = (_as_vector(v) for v in value[:HISTORY_DEPTH])
    return tuple(e for e in entries if e is not None)


def _flat_vector(record: dict[str, Any], template: str) -> Digits | None:
    return _as_vector([record.get(template.format(o)) for o in _ORDINALS])


def _flat_history(record: dict[str, Any], template: str) -> tuple[Digits, ...]:
    entries = []
    for depth in range(1, HISTORY_DEPTH + 1):
        vector = _as_vector([record.get(template.format(o, depth)) for o in _ORDINALS])
        if vector is not None:
            entries.append(vector)
    return tuple(entries)
