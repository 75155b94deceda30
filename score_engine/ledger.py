"""Entry ledger: appends entries and enforces per-activity daily caps."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, tzinfo
from typing import Callable, Optional

from score_engine.day_boundary import day_range, localize, validate_cutoff_hour
from score_engine.errors import ActivityNotFound
from score_engine.schema import Activity, AppendResult, Entry
from score_engine.store import RecordStore

log = logging.getLogger("score_engine.ledger")


def point_ceiling(activity: Activity) -> Optional[float]:
    """Daily point ceiling for an activity, or None when it is uncapped.

    Boolean activities count their cap in completions, so one completion is
    worth ``points_per_unit``; every other unit type caps points directly.
    """

    cap = activity.daily_cap
    if cap is None or cap < 0:
        return None
    if activity.unit_type == "boolean":
        return cap * abs(activity.points_per_unit)
    return cap


def capped_points(raw_points: float, ceiling: float, existing_positive: float) -> float:
    remaining = max(0.0, ceiling - existing_positive)
    return max(0.0, min(raw_points, remaining))


class EntryLedger:
    """Append-only log of entries backed by a ``RecordStore``.

    The cap check is a read-sum-write sequence, so appends are serialized per
    activity. Appends for different activities do not contend.
    """

    def __init__(
        self,
        store: RecordStore,
        cutoff_provider: Optional[Callable[[], int]] = None,
        tz: tzinfo | None = None,
    ):
        self._store = store
        self._cutoff_provider = cutoff_provider or (lambda: store.get_preferences().day_cutoff_hour)
        self._tz = tz
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _activity_lock(self, activity_id: str) -> threading.Lock:
        if self._store.get_activity(activity_id) is None:
            raise ActivityNotFound(activity_id)
        with self._locks_guard:
            lock = self._locks.get(activity_id)
            if lock is None:
                lock = self._locks[activity_id] = threading.Lock()
            return lock

    def _existing_positive_points(self, activity_id: str, start: datetime, end: datetime) -> float:
        entries = self._store.query_entries(activity_id=activity_id, start=start, end=end)
        return sum(entry.computed_points for entry in entries if entry.computed_points > 0)

    def append(
        self,
        activity_id: str,
        timestamp: datetime,
        amount: float,
        note: Optional[str] = None,
        cutoff_hour: Optional[int] = None,
    ) -> AppendResult:
        """Record an entry, clipping positive points to the activity's daily cap."""

        cutoff = validate_cutoff_hour(self._cutoff_provider() if cutoff_hour is None else cutoff_hour)
        timestamp = localize(timestamp, self._tz)

        with self._activity_lock(activity_id):
            activity = self._store.get_activity(activity_id)
            if activity is None:
                raise ActivityNotFound(activity_id)

            raw_points = float(amount) * activity.points_per_unit
            ceiling = point_ceiling(activity)
            if ceiling is not None and raw_points > 0:
                start, end = day_range(timestamp, cutoff, self._tz)
                existing = self._existing_positive_points(activity_id, start, end)
                computed = capped_points(raw_points, ceiling, existing)
            else:
                computed = raw_points
            was_capped = computed < raw_points

            entry = Entry(
                activity_id=activity_id,
                timestamp=timestamp,
                amount=float(amount),
                computed_points=computed,
                note=note,
            )
            self._store.insert_entry(entry)

        if was_capped:
            log.info("Capped %s: %.2f -> %.2f points", activity.name, raw_points, computed)
        return AppendResult(entry=entry, was_capped=was_capped)

    def delete(self, entry_id: str) -> None:
        """Remove an entry. Later entries of the same day keep their points."""

        self._store.delete_entry(entry_id)
        log.debug("Deleted entry %s", entry_id)

    def query(
        self,
        activity_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Entry]:
        """Entries ordered by timestamp, optionally filtered by activity and ``[start, end)``."""

        if start is not None:
            start = localize(start, self._tz)
        if end is not None:
            end = localize(end, self._tz)
        return self._store.query_entries(activity_id=activity_id, start=start, end=end)
