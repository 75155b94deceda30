from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from score_engine.adapters.csv_adapter import parse_activities, parse_entries
from score_engine.config import EngineConfig
from score_engine.report import build_report, load_engine

EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def test_build_report_on_sample_dataset():
    activities = parse_activities(str(EXAMPLES / "sample_activities.csv"))
    entries = parse_entries(str(EXAMPLES / "sample_entries.csv"))
    engine = load_engine(activities, entries, cutoff_hour=4)

    report = build_report(engine, now=datetime(2025, 1, 8, 14), days=3)

    assert report["cutoff_hour"] == 4
    assert [point["day_start"] for point in report["daily_net"]] == [
        "2025-01-06T04:00:00",
        "2025-01-07T04:00:00",
        "2025-01-08T04:00:00",
    ]
    # the 07:30 meditation on the 6th is after the cutoff, the 01:30 scroll on the 7th is not
    assert report["daily_net"][0]["value"] == 10 + 5 + 15 + 10 - 15
    assert report["negative_slices"][0]["label"] == "Doomscrolling"
    assert report["correlation"] is None
    assert all(s["kind"] in ("hydration", "meditation", "positivity") for s in report["suggestions"])
    assert len(report["suggestions"]) <= 2


def test_build_report_with_configured_timezone():
    try:
        zone = ZoneInfo("Europe/Berlin")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")
    activities = parse_activities(str(EXAMPLES / "sample_activities.csv"))
    entries = parse_entries(str(EXAMPLES / "sample_entries.csv"))
    engine = load_engine(activities, entries, cutoff_hour=4, config=EngineConfig(timezone=zone))

    report = build_report(engine, now=datetime(2025, 1, 8, 14), days=3)

    assert report["daily_net"][0]["day_start"] == "2025-01-06T04:00:00+01:00"
    assert report["daily_net"][0]["value"] == 10 + 5 + 15 + 10 - 15
