"""CSV import/export for activities and entries."""

from __future__ import annotations

import csv
from datetime import datetime
from typing import Iterable

from score_engine.schema import POLARITIES, UNIT_TYPES, Activity, Entry

ACTIVITY_HEADERS = [
    "id",
    "name",
    "emoji",
    "colorHex",
    "category",
    "polarity",
    "unitType",
    "unitLabel",
    "pointsPerUnit",
    "dailyCap",
    "isPrivate",
    "showOnStats",
    "createdAt",
    "isArchived",
]
ENTRY_HEADERS = ["id", "deedId", "timestamp", "amount", "computedPoints", "note"]

_REQUIRED_ACTIVITY_FIELDS = {"id", "name", "polarity", "unitType", "pointsPerUnit"}
_REQUIRED_ENTRY_FIELDS = {"id", "deedId", "timestamp", "amount", "computedPoints"}


def format_number(value: float) -> str:
    return f"{value:.6f}".rstrip("0").rstrip(".") if value != int(value) else str(int(value))


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw in (None, ""):
        return default
    return raw.strip().lower() in ("true", "1", "yes")


def _parse_float(raw: str, field: str, row_number: int) -> float:
    try:
        return float(raw)
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: invalid {field}") from exc


def _parse_timestamp(raw: str, field: str, row_number: int) -> datetime:
    try:
        return datetime.fromisoformat(raw.strip())
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: malformed {field}") from exc


def _parse_activity_row(row: dict, row_number: int) -> Activity:
    missing = sorted(field for field in _REQUIRED_ACTIVITY_FIELDS if not row.get(field))
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    polarity = row["polarity"].strip()
    if polarity not in POLARITIES:
        raise ValueError(f"Row {row_number}: invalid polarity '{polarity}'")
    unit_type = row["unitType"].strip()
    if unit_type not in UNIT_TYPES:
        raise ValueError(f"Row {row_number}: invalid unitType '{unit_type}'")

    cap_raw = row.get("dailyCap")
    daily_cap = _parse_float(cap_raw, "dailyCap", row_number) if cap_raw not in (None, "") else None
    if daily_cap is not None and daily_cap < 0:
        raise ValueError(f"Row {row_number}: dailyCap must be >= 0")

    activity = Activity(
        id=row["id"].strip(),
        name=row["name"].strip(),
        emoji=row.get("emoji") or "",
        color_hex=row.get("colorHex") or "#FFFFFF",
        category=(row.get("category") or "").strip(),
        polarity=polarity,
        unit_type=unit_type,
        unit_label=(row.get("unitLabel") or "").strip(),
        points_per_unit=_parse_float(row["pointsPerUnit"], "pointsPerUnit", row_number),
        daily_cap=daily_cap,
        is_private=_parse_bool(row.get("isPrivate"), False),
        show_on_stats=_parse_bool(row.get("showOnStats"), True),
        is_archived=_parse_bool(row.get("isArchived"), False),
        sort_order=row_number - 2,
    )
    if row.get("createdAt"):
        activity.created_at = _parse_timestamp(row["createdAt"], "createdAt", row_number)
    return activity


def _parse_entry_row(row: dict, row_number: int) -> Entry:
    missing = sorted(field for field in _REQUIRED_ENTRY_FIELDS if not row.get(field))
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    note = row.get("note")
    return Entry(
        id=row["id"].strip(),
        activity_id=row["deedId"].strip(),
        timestamp=_parse_timestamp(row["timestamp"], "timestamp", row_number),
        amount=_parse_float(row["amount"], "amount", row_number),
        computed_points=_parse_float(row["computedPoints"], "computedPoints", row_number),
        note=note if note else None,
    )


def _read_rows(file_path: str) -> list[tuple[int, dict]]:
    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []
        return list(enumerate(reader, start=2))


def parse_activities(file_path: str) -> list[Activity]:
    """Parse an activities CSV file in catalog order."""

    return [_parse_activity_row(row, row_number) for row_number, row in _read_rows(file_path)]


def parse_entries(file_path: str) -> list[Entry]:
    """Parse an entries CSV file."""

    return [_parse_entry_row(row, row_number) for row_number, row in _read_rows(file_path)]


def _activity_row(activity: Activity) -> list[str]:
    return [
        activity.id,
        activity.name,
        activity.emoji,
        activity.color_hex,
        activity.category,
        activity.polarity,
        activity.unit_type,
        activity.unit_label,
        format_number(activity.points_per_unit),
        format_number(activity.daily_cap) if activity.daily_cap is not None else "",
        str(activity.is_private).lower(),
        str(activity.show_on_stats).lower(),
        activity.created_at.isoformat(),
        str(activity.is_archived).lower(),
    ]


def _entry_row(entry: Entry) -> list[str]:
    return [
        entry.id,
        entry.activity_id,
        entry.timestamp.isoformat(),
        format_number(entry.amount),
        format_number(entry.computed_points),
        entry.note or "",
    ]


def _write(file_path: str, headers: list[str], rows: Iterable[list[str]]) -> None:
    with open(file_path, "w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(headers)
        writer.writerows(rows)


def dump_activities(activities: Iterable[Activity], file_path: str) -> None:
    _write(file_path, ACTIVITY_HEADERS, (_activity_row(activity) for activity in activities))


def dump_entries(entries: Iterable[Entry], file_path: str) -> None:
    _write(file_path, ENTRY_HEADERS, (_entry_row(entry) for entry in entries))
