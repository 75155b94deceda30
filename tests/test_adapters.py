import json
from datetime import datetime

import pytest

from score_engine.adapters import csv_adapter, json_adapter
from score_engine.schema import Activity, Entry


def sample_activities():
    return [
        Activity(
            id="water",
            name="Drink Water",
            emoji="💧",
            category="Health",
            unit_type="quantity",
            unit_label="ml",
            points_per_unit=0.01,
            daily_cap=20,
            created_at=datetime(2025, 1, 1, 8),
        ),
        Activity(id="scroll", name="Doomscrolling", polarity="negative", points_per_unit=-0.5),
    ]


def test_csv_parse_entries(tmp_path):
    path = tmp_path / "entries.csv"
    path.write_text(
        "id,deedId,timestamp,amount,computedPoints,note\n"
        "e1,water,2025-01-01T09:00:00,500,5,\n"
        'e2,water,2025-01-01T10:00:00,250,2.5,"with, comma"\n',
        encoding="utf-8",
    )
    entries = csv_adapter.parse_entries(str(path))
    assert len(entries) == 2
    assert entries[0].note is None
    assert entries[1].note == "with, comma"
    assert entries[1].computed_points == 2.5


def test_csv_parse_invalid_row(tmp_path):
    path = tmp_path / "entries.csv"
    path.write_text("id,deedId,timestamp,amount,computedPoints\ne1,water,bad,1,1\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Row 2"):
        csv_adapter.parse_entries(str(path))


def test_csv_parse_activity_rejects_unknown_polarity(tmp_path):
    path = tmp_path / "activities.csv"
    path.write_text("id,name,polarity,unitType,pointsPerUnit\na,Walk,neutral,count,1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        csv_adapter.parse_activities(str(path))


def test_csv_dump_then_parse_activities(tmp_path):
    path = tmp_path / "activities.csv"
    csv_adapter.dump_activities(sample_activities(), str(path))

    header = path.read_text(encoding="utf-8").splitlines()[0]
    assert header.split(",") == csv_adapter.ACTIVITY_HEADERS

    parsed = csv_adapter.parse_activities(str(path))
    assert [a.id for a in parsed] == ["water", "scroll"]
    assert parsed[0].daily_cap == 20
    assert parsed[1].daily_cap is None
    assert parsed[0].created_at == datetime(2025, 1, 1, 8)


def test_json_parse_entries(tmp_path):
    path = tmp_path / "entries.json"
    payload = [
        {"id": "e1", "deedId": "walk", "timestamp": "2025-01-01T09:00:00", "amount": 1, "computedPoints": 15},
        {"id": "e2", "deedId": "walk", "timestamp": "2025-01-01T10:00:00", "amount": 1, "computedPoints": 0, "note": "again"},
    ]
    path.write_text(json.dumps(payload), encoding="utf-8")
    entries = json_adapter.parse_entries(str(path))
    assert [e.computed_points for e in entries] == [15.0, 0.0]
    assert entries[1].note == "again"


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "entries.json"
    path.write_text(
        json.dumps([{"id": "e1", "deedId": "a", "timestamp": "bad", "amount": 1, "computedPoints": 1}]),
        encoding="utf-8",
    )
    with pytest.raises(ValueError):
        json_adapter.parse_entries(str(path))


def test_json_requires_list(tmp_path):
    path = tmp_path / "activities.json"
    path.write_text(json.dumps({"id": "a"}), encoding="utf-8")
    with pytest.raises(ValueError):
        json_adapter.parse_activities(str(path))


def test_json_dump_uses_export_keys(tmp_path):
    path = tmp_path / "entries.json"
    entry = Entry("walk", datetime(2025, 1, 1, 9), 1.0, 15.0, id="e1")
    json_adapter.dump_entries([entry], str(path))
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == [
        {
            "amount": 1.0,
            "computedPoints": 15.0,
            "deedId": "walk",
            "id": "e1",
            "note": None,
            "timestamp": "2025-01-01T09:00:00",
        }
    ]
