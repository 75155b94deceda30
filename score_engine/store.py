"""Record-store collaborator interface and an in-memory implementation."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional, Protocol

from score_engine.schema import Activity, Entry, Preferences


class RecordStore(Protocol):
    """Persistence operations the engine depends on."""

    def get_activity(self, activity_id: str) -> Optional[Activity]: ...

    def list_activities(self, include_archived: bool = False) -> list[Activity]: ...

    def save_activity(self, activity: Activity) -> None: ...

    def delete_activity(self, activity_id: str) -> None: ...

    def insert_entry(self, entry: Entry) -> None: ...

    def delete_entry(self, entry_id: str) -> None: ...

    def delete_entries_for_activity(self, activity_id: str) -> int: ...

    def query_entries(
        self,
        activity_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Entry]: ...

    def get_preferences(self) -> Preferences: ...

    def save_preferences(self, preferences: Preferences) -> None: ...


class InMemoryStore:
    """Thread-safe dict-backed store. Entry ranges are half-open ``[start, end)``."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._activities: dict[str, Activity] = {}
        self._entries: dict[str, Entry] = {}
        self._preferences: Optional[Preferences] = None

    def get_activity(self, activity_id: str) -> Optional[Activity]:
        with self._lock:
            activity = self._activities.get(activity_id)
            return replace(activity) if activity is not None else None

    def list_activities(self, include_archived: bool = False) -> list[Activity]:
        with self._lock:
            activities = [replace(a) for a in self._activities.values() if include_archived or not a.is_archived]
        return sorted(activities, key=lambda a: (a.sort_order, a.created_at, a.id))

    def save_activity(self, activity: Activity) -> None:
        with self._lock:
            self._activities[activity.id] = replace(activity)

    def delete_activity(self, activity_id: str) -> None:
        with self._lock:
            self._activities.pop(activity_id, None)

    def insert_entry(self, entry: Entry) -> None:
        with self._lock:
            self._entries[entry.id] = entry

    def delete_entry(self, entry_id: str) -> None:
        with self._lock:
            self._entries.pop(entry_id, None)

    def delete_entries_for_activity(self, activity_id: str) -> int:
        with self._lock:
            doomed = [entry_id for entry_id, entry in self._entries.items() if entry.activity_id == activity_id]
            for entry_id in doomed:
                del self._entries[entry_id]
            return len(doomed)

    def query_entries(
        self,
        activity_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Entry]:
        with self._lock:
            entries = list(self._entries.values())

        matched = [
            entry
            for entry in entries
            if (activity_id is None or entry.activity_id == activity_id)
            and (start is None or entry.timestamp >= start)
            and (end is None or entry.timestamp < end)
        ]
        return sorted(matched, key=lambda e: e.timestamp)

    def get_preferences(self) -> Preferences:
        with self._lock:
            if self._preferences is None:
                self._preferences = Preferences()
            return replace(self._preferences)

    def save_preferences(self, preferences: Preferences) -> None:
        with self._lock:
            self._preferences = replace(preferences)
