"""
pick3/pipeline/draw_ingestor.py
Turn raw draw exports into Draw rows with embedded history and store them,
plus the one-off seeding of the 220-row combinations table.
"""
from __future__ import annotations

import csv
import json
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Iterable

from pick3.core.combination import generate_combinations, generation_stats
from pick3.core.draw import Draw, DrawHistory
from pick3.utils import supabase_client as db
from pick3.utils.config import MONTH_NAMES, get_analysis_config
from pick3.utils.logger import get_logger

log = get_logger("pipeline.ingestor")

CSV_DIGIT_COLUMNS = ("first", "second", "third")


# ── File loading ──────────────────────────────────────────────────

def _csv_row(row: dict[str, str]) -> dict[str, Any]:
    """draw_index,draw_date,draw_time,first,second,third,fireball -> snake_case record."""
    def as_int(value: str | None) -> int | None:
        value = (value or "").strip()
        return int(value) if value.lstrip("-").isdigit() else None

    return {
        "draw_index": as_int(row.get("draw_index")),
        "draw_date": row.get("draw_date") or None,
        "draw_month": row.get("draw_month") or None,
        "draw_year": row.get("draw_year") or None,
        "draw_time": row.get("draw_time") or None,
        "original_digits": [as_int(row.get(c)) for c in CSV_DIGIT_COLUMNS],
        "fireball": as_int(row.get("fireball")),
    }


def load_records(path: str | Path) -> list[dict[str, Any]]:
    """Read a .jsonl (one record per line) or .csv export."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Draw file not found: {path}")

    if path.suffix.lower() == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            return [_csv_row(row) for row in csv.DictReader(f)]

    records = []
    with open(path, encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as exc:
                log.warning(f"{path.name}:{lineno}: skipping unparseable line ({exc})")
    return records


def _fill_month_year(draw: Draw) -> Draw:
    """Derive draw month / year from an ISO draw date when the export omits them."""
    if (draw.month and draw.year) or not draw.date:
        return draw
    try:
        parsed = date.fromisoformat(draw.date[:10])
    except ValueError:
        return draw
    return replace(
        draw,
        month=draw.month or MONTH_NAMES[parsed.month - 1],
        year=draw.year or str(parsed.year),
    )


# ── Draw building ─────────────────────────────────────────────────

def build_draws(records: Iterable[dict[str, Any]], depth: int | None = None) -> list[Draw]:
    """
    records must be chronological (oldest first). Each draw gets a snapshot of
    the draws ingested before it, most recent first. Draws without an index get
    their 1-based position in the stream.
    """
    depth = depth or get_analysis_config().history_depth
    history = DrawHistory(depth)
    draws: list[Draw] = []
    skipped = 0

    for position, record in enumerate(records, start=1):
        draw = Draw.from_record(record)
        if draw is None:
            skipped += 1
            continue
        previous_original, previous_sorted = history.snapshot()
        draw = replace(
            _fill_month_year(draw),
            index=draw.index if draw.index is not None else position,
            previous_original=previous_original,
            previous_sorted=previous_sorted,
        )
        history.push(draw)
        draws.append(draw)

    if skipped:
        log.warning(f"Skipped {skipped} malformed draw records")
    log.info(f"Built {len(draws)} draws with history depth {depth}")
    return draws


def ingest_draws(records: Iterable[dict[str, Any]], dry_run: bool = False) -> dict:
    records = list(records)
    draws = build_draws(records)
    if not draws:
        msg = "No valid draws in input"
        log.warning(msg)
        return {"success": False, "error": msg, "read": len(records)}

    rows = [d.to_record() for d in draws]
    if dry_run:
        log.info(f"[DRY RUN] Would upsert {len(rows)} draws (index {draws[0].index} → {draws[-1].index})")
        written = len(rows)
    else:
        try:
            written = db.upsert_draws(rows)
        except Exception as exc:
            log.error(f"Draw upsert failed: {exc}")
            return {"success": False, "error": str(exc), "read": len(records)}

    log.info(f"[DONE] read={len(records)} valid={len(draws)} written={written}")
    return {
        "success": True,
        "read": len(records),
        "valid": len(draws),
        "skipped": len(records) - len(draws),
        "written": written,
    }


def seed_combinations(dry_run: bool = False) -> dict:
    rows = generate_combinations(get_analysis_config())
    stats = generation_stats(rows)
    if dry_run:
        log.info(f"[DRY RUN] Would store {len(rows)} combinations")
        return {"success": True, "written": 0, "stats": stats}
    try:
        written = db.upsert_combinations(rows)
    except Exception as exc:
        log.error(f"Combination seeding failed: {exc}")
        return {"success": False, "error": str(exc)}
    log.info(f"Seeded {written} combinations ({stats['valid_combinations']} valid)")
    return {"success": True, "written": written, "stats": stats}
