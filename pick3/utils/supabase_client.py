"""
pick3/utils/supabase_client.py
Supabase client wrapper for the draws, combinations and analysis_reports tables.
"""
from __future__ import annotations

from typing import Any

from supabase import Client, create_client

from pick3.utils.config import (
    COMBINATIONS_TABLE,
    DRAWS_TABLE,
    REPORTS_TABLE,
    SUPABASE_KEY,
    SUPABASE_URL,
)
from pick3.utils.logger import get_logger

log = get_logger("supabase")

_client: Client | None = None

PAGE_SIZE = 1000


def get_client() -> Client:
    global _client
    if _client is None:
        if not SUPABASE_URL or not SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL / SUPABASE_KEY are not set")
        _client = create_client(SUPABASE_URL, SUPABASE_KEY)
    return _client


def _fetch_all(query_factory) -> list[dict]:
    """Page through a select with .range() until a short page comes back."""
    rows: list[dict] = []
    start = 0
    while True:
        resp = query_factory().range(start, start + PAGE_SIZE - 1).execute()
        page = resp.data or []
        rows.extend(page)
        if len(page) < PAGE_SIZE:
            return rows
        start += PAGE_SIZE


# ── draws ─────────────────────────────────────────────────────────

def get_draws(month: str | None = None, year: str | None = None) -> list[dict]:
    """All draw rows, newest first (draw_index descending)."""
    db = get_client()

    def query():
        q = db.table(DRAWS_TABLE).select("*")
        if month:
            q = q.eq("draw_month", month)
        if year:
            q = q.eq("draw_year", year)
        return q.order("draw_index", desc=True)

    return _fetch_all(query)


def upsert_draws(records: list[dict[str, Any]]) -> int:
    """Upsert a batch of draw rows in a single request. Returns rows written."""
    if not records:
        return 0
    db = get_client()
    resp = db.table(DRAWS_TABLE).upsert(records, on_conflict="draw_index").execute()
    return len(resp.data or [])


def count_draws() -> int:
    db = get_client()
    resp = db.table(DRAWS_TABLE).select("id", count="exact").limit(1).execute()
    return resp.count or 0


# ── combinations ──────────────────────────────────────────────────

def get_combinations() -> list[dict]:
    db = get_client()
    return _fetch_all(lambda: db.table(COMBINATIONS_TABLE).select("*").order("id"))


def upsert_combinations(records: list[dict[str, Any]]) -> int:
    """
    Write every combination row in one upsert so a run is stored all-or-nothing.
    Raises if Supabase did not acknowledge every row.
    """
    if not records:
        return 0
    db = get_client()
    resp = db.table(COMBINATIONS_TABLE).upsert(records, on_conflict="id").execute()
    written = len(resp.data or [])
    if written != len(records):
        raise RuntimeError(f"Combination upsert incomplete: {written}/{len(records)} rows acknowledged")
    return written


# ── analysis_reports ──────────────────────────────────────────────

def save_report(report_type: str, payload: dict[str, Any]) -> dict:
    db = get_client()
    resp = (
        db.table(REPORTS_TABLE)
        .upsert({"report_type": report_type, "payload": payload}, on_conflict="report_type")
        .execute()
    )
    return resp.data[0] if resp.data else {}
