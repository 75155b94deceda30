"""Print a score report for exported activity/entry files."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from score_engine.adapters import csv_adapter, json_adapter
from score_engine.config import load_config
from score_engine.report import build_report, load_engine


def _adapter_for(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter
    if suffix == ".json":
        return json_adapter
    raise ValueError("Unsupported input format, expected .csv or .json")


def main() -> None:
    parser = argparse.ArgumentParser(description="Summarize daily scores and insights")
    parser.add_argument("--activities", required=True, help="Path to CSV/JSON activities export")
    parser.add_argument("--entries", required=True, help="Path to CSV/JSON entries export")
    parser.add_argument("--cutoff", type=int, default=None, help="Day cutoff hour (0-23)")
    parser.add_argument("--now", default=None, help="ISO timestamp to report as of")
    parser.add_argument("--days", type=int, default=7)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    activities_path = Path(args.activities)
    entries_path = Path(args.entries)
    activities = _adapter_for(activities_path).parse_activities(str(activities_path))
    entries = _adapter_for(entries_path).parse_entries(str(entries_path))

    config = load_config()
    cutoff = args.cutoff if args.cutoff is not None else config.cutoff_hour
    engine = load_engine(activities, entries, cutoff_hour=cutoff, config=config)

    now = datetime.fromisoformat(args.now) if args.now else max((e.timestamp for e in entries), default=datetime.now())
    report = build_report(engine, now, days=args.days)
    print(json.dumps(report, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
