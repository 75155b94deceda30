"""Demo script for score-engine."""

import json
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from score_engine.adapters.csv_adapter import parse_activities, parse_entries
from score_engine.report import build_report, load_engine


def main() -> None:
    activities = parse_activities("examples/sample_activities.csv")
    entries = parse_entries("examples/sample_entries.csv")
    engine = load_engine(activities, entries, cutoff_hour=4)

    result = engine.append_entry("walk", datetime.fromisoformat("2025-01-08T19:00:00"), 1)
    print("Logged walk:", result.entry.computed_points, "capped" if result.was_capped else "")

    report = build_report(engine, now=datetime.fromisoformat("2025-01-08T14:00:00"))
    print(json.dumps(report, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
