"""JSON import/export for activities and entries."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Iterable

from score_engine.schema import POLARITIES, UNIT_TYPES, Activity, Entry

_REQUIRED_ACTIVITY_FIELDS = {"id", "name", "polarity", "unitType", "pointsPerUnit"}
_REQUIRED_ENTRY_FIELDS = {"id", "deedId", "timestamp", "amount", "computedPoints"}


def _missing(item: dict, required: set[str]) -> list[str]:
    return sorted(field for field in required if item.get(field) in (None, ""))


def _parse_timestamp(raw, field: str, index: int) -> datetime:
    try:
        return datetime.fromisoformat(str(raw))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Item {index}: malformed {field}") from exc


def _parse_float(raw, field: str, index: int) -> float:
    try:
        return float(raw)
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Item {index}: invalid {field}") from exc


def _parse_activity(item: dict, index: int) -> Activity:
    missing = _missing(item, _REQUIRED_ACTIVITY_FIELDS)
    if missing:
        raise ValueError(f"Item {index}: missing required fields {missing}")

    polarity = str(item["polarity"]).strip()
    if polarity not in POLARITIES:
        raise ValueError(f"Item {index}: invalid polarity '{polarity}'")
    unit_type = str(item["unitType"]).strip()
    if unit_type not in UNIT_TYPES:
        raise ValueError(f"Item {index}: invalid unitType '{unit_type}'")

    cap_raw = item.get("dailyCap")
    daily_cap = _parse_float(cap_raw, "dailyCap", index) if cap_raw is not None else None
    if daily_cap is not None and daily_cap < 0:
        raise ValueError(f"Item {index}: dailyCap must be >= 0")

    activity = Activity(
        id=str(item["id"]),
        name=str(item["name"]).strip(),
        emoji=str(item.get("emoji") or ""),
        color_hex=str(item.get("colorHex") or "#FFFFFF"),
        category=str(item.get("category") or "").strip(),
        polarity=polarity,
        unit_type=unit_type,
        unit_label=str(item.get("unitLabel") or "").strip(),
        points_per_unit=_parse_float(item["pointsPerUnit"], "pointsPerUnit", index),
        daily_cap=daily_cap,
        is_private=bool(item.get("isPrivate", False)),
        show_on_stats=bool(item.get("showOnStats", True)),
        is_archived=bool(item.get("isArchived", False)),
        sort_order=int(item.get("sortOrder", index - 1)),
    )
    if item.get("createdAt"):
        activity.created_at = _parse_timestamp(item["createdAt"], "createdAt", index)
    return activity


def _parse_entry(item: dict, index: int) -> Entry:
    missing = _missing(item, _REQUIRED_ENTRY_FIELDS)
    if missing:
        raise ValueError(f"Item {index}: missing required fields {missing}")

    note = item.get("note")
    return Entry(
        id=str(item["id"]),
        activity_id=str(item["deedId"]),
        timestamp=_parse_timestamp(item["timestamp"], "timestamp", index),
        amount=_parse_float(item["amount"], "amount", index),
        computed_points=_parse_float(item["computedPoints"], "computedPoints", index),
        note=str(note) if note else None,
    )


def _load_list(file_path: str) -> list:
    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")
    return payload


def parse_activities(file_path: str) -> list[Activity]:
    """Parse a JSON list of activity objects."""

    return [_parse_activity(item, i) for i, item in enumerate(_load_list(file_path), start=1)]


def parse_entries(file_path: str) -> list[Entry]:
    """Parse a JSON list of entry objects."""

    return [_parse_entry(item, i) for i, item in enumerate(_load_list(file_path), start=1)]


def activity_to_dict(activity: Activity) -> dict:
    return {
        "id": activity.id,
        "name": activity.name,
        "emoji": activity.emoji,
        "colorHex": activity.color_hex,
        "category": activity.category,
        "polarity": activity.polarity,
        "unitType": activity.unit_type,
        "unitLabel": activity.unit_label,
        "pointsPerUnit": activity.points_per_unit,
        "dailyCap": activity.daily_cap,
        "isPrivate": activity.is_private,
        "showOnStats": activity.show_on_stats,
        "createdAt": activity.created_at.isoformat(),
        "isArchived": activity.is_archived,
        "sortOrder": activity.sort_order,
    }


def entry_to_dict(entry: Entry) -> dict:
    return {
        "id": entry.id,
        "deedId": entry.activity_id,
        "timestamp": entry.timestamp.isoformat(),
        "amount": entry.amount,
        "computedPoints": entry.computed_points,
        "note": entry.note,
    }


def dump_activities(activities: Iterable[Activity], file_path: str) -> None:
    payload = [activity_to_dict(activity) for activity in activities]
    with open(file_path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True, ensure_ascii=False)


def dump_entries(entries: Iterable[Entry], file_path: str) -> None:
    payload = [entry_to_dict(entry) for entry in entries]
    with open(file_path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True, ensure_ascii=False)
