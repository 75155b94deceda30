"""Activity catalog: ordering, cascade deletion and search."""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import replace
from typing import Iterable, Optional

from score_engine.schema import Activity
from score_engine.store import RecordStore

log = logging.getLogger("score_engine.catalog")


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def search(activities: Iterable[Activity], query: str) -> list[Activity]:
    """Activities whose name or category contains ``query`` (case and accent
    insensitive), or whose emoji contains it verbatim. Empty query matches all."""

    activities = list(activities)
    raw = query.strip()
    if not raw:
        return activities
    folded = _fold(raw)
    return [a for a in activities if folded in _fold(a.name) or folded in _fold(a.category) or raw in a.emoji]


class ActivityCatalog:
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, activity_id: str) -> Optional[Activity]:
        return self._store.get_activity(activity_id)

    def list(self, include_archived: bool = False) -> list[Activity]:
        """Activities ordered by sort order, then creation time."""

        return self._store.list_activities(include_archived=include_archived)

    def upsert(self, activity: Activity) -> Activity:
        """Insert or update an activity; new ones without a sort order go last."""

        activity.validate()
        if self._store.get_activity(activity.id) is None and activity.sort_order < 0:
            existing = self._store.list_activities(include_archived=True)
            next_order = max((a.sort_order for a in existing), default=-1) + 1
            activity = replace(activity, sort_order=next_order)
        self._store.save_activity(activity)
        return activity

    def reorder(self, activity_ids: list[str]) -> None:
        for index, activity_id in enumerate(activity_ids):
            activity = self._store.get_activity(activity_id)
            if activity is None:
                continue
            self._store.save_activity(replace(activity, sort_order=index))

    def delete(self, activity_id: str) -> int:
        """Delete an activity and its entries; returns the number of entries removed."""

        removed = self._store.delete_entries_for_activity(activity_id)
        self._store.delete_activity(activity_id)
        log.info("Deleted activity %s with %d entries", activity_id, removed)
        return removed

    def reset_all_data(self) -> None:
        """Remove every activity and entry. Preferences are left untouched."""

        for activity in self._store.list_activities(include_archived=True):
            self.delete(activity.id)
