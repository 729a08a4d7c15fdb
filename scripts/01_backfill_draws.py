"""
scripts/01_backfill_draws.py
Load a local draw export (JSONL or CSV, oldest first), attach 8-deep history
snapshots and upsert into Supabase. Optionally seeds the combinations table.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pick3.pipeline.draw_ingestor import ingest_draws, load_records, seed_combinations
from pick3.utils import supabase_client as db
from pick3.utils.logger import get_logger

log = get_logger("backfill")


def main():
    parser = argparse.ArgumentParser(description="Pick-3 draw backfill")
    parser.add_argument("--file", required=True, help="Draw export (.jsonl or .csv), chronological")
    parser.add_argument("--dry-run", action="store_true", help="Simulate only, no DB writes")
    parser.add_argument("--seed-combinations", action="store_true", help="Also store the 220 combinations")
    args = parser.parse_args()

    records = load_records(args.file)
    log.info(f"Loaded {len(records)} records from {args.file}")

    result = ingest_draws(records, dry_run=args.dry_run)
    seeded = seed_combinations(dry_run=args.dry_run) if args.seed_combinations else None

    print("\n" + "=" * 60)
    print("BACKFILL SUMMARY")
    print("=" * 60)
    if result["success"]:
        print(f"  read={result['read']:6d} | valid={result['valid']:6d} | skipped={result['skipped']:4d} | written={result['written']:6d}")
        if not args.dry_run:
            print(f"  draws table now holds {db.count_draws()} rows")
    else:
        print(f"  FAILED: {result['error']}")
    if seeded is not None:
        status = f"written={seeded['written']}" if seeded["success"] else f"FAILED: {seeded['error']}"
        print(f"  combinations: {status}")
    print("=" * 60)

    if not result["success"] or (seeded is not None and not seeded["success"]):
        sys.exit(1)


if __name__ == "__main__":
    main()
