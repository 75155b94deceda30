"""Per-app-day score aggregation."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Optional

from score_engine.day_boundary import day_range, day_sequence, day_start, localize, validate_cutoff_hour
from score_engine.schema import Activity, CategoryComparison, ContributionSlice, DailyPoint, DailyScore, Entry
from score_engine.store import RecordStore


def daily_totals(
    entries: Iterable[Entry],
    cutoff_hour: int,
    tz: tzinfo | None = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> dict[datetime, float]:
    """Sum computed points per app-day. Days without entries are omitted."""

    validate_cutoff_hour(cutoff_hour)
    if start is not None:
        start = localize(start, tz)
    if end is not None:
        end = localize(end, tz)

    totals: dict[datetime, float] = defaultdict(float)
    for entry in entries:
        timestamp = localize(entry.timestamp, tz)
        if start is not None and timestamp < start:
            continue
        if end is not None and timestamp >= end:
            continue
        totals[day_start(timestamp, cutoff_hour, tz)] += entry.computed_points
    return dict(totals)


def dense_series(totals: dict[datetime, float], day_starts: Iterable[datetime]) -> list[DailyPoint]:
    """Zero-fill a sparse totals map over the given day starts."""

    return [DailyPoint(day_start=start, value=totals.get(start, 0.0)) for start in day_starts]


def per_activity_totals(
    entries: Iterable[Entry],
    cutoff_hour: int,
    tz: tzinfo | None = None,
    sign: int = 0,
) -> dict[str, dict[datetime, float]]:
    """Per-activity day totals. ``sign`` > 0 keeps positive points, < 0 keeps
    the magnitude of negative points, 0 keeps the net value."""

    result: dict[str, dict[datetime, float]] = defaultdict(lambda: defaultdict(float))
    for entry in entries:
        value = entry.computed_points
        if sign > 0 and value <= 0:
            continue
        if sign < 0:
            if value >= 0:
                continue
            value = abs(value)
        result[entry.activity_id][day_start(entry.timestamp, cutoff_hour, tz)] += value
    return {activity_id: dict(days) for activity_id, days in result.items()}


def contribution_slices(
    totals: dict[str, float],
    activities: dict[str, Activity],
    limit: int = 6,
) -> list[ContributionSlice]:
    """Top ``limit`` contributors by value plus an "Others" remainder slice."""

    ranked = sorted(
        ((activities[activity_id], value) for activity_id, value in totals.items() if activity_id in activities and value > 0),
        key=lambda item: item[1],
        reverse=True,
    )
    if not ranked:
        return []

    top = ranked[:limit]
    remainder = sum(value for _, value in ranked[limit:])
    total = sum(value for _, value in top) + remainder

    slices = [
        ContributionSlice(
            activity_id=activity.id,
            emoji=activity.emoji,
            label=activity.name,
            value=value,
            percentage=value / total if total > 0 else 0.0,
        )
        for activity, value in top
    ]
    if remainder > 0:
        slices.append(
            ContributionSlice(
                activity_id=None,
                emoji="…",
                label="Others",
                value=remainder,
                percentage=remainder / total if total > 0 else 0.0,
            )
        )
    return slices


def month_start(day: datetime, cutoff_hour: int) -> datetime:
    return day.replace(day=1, hour=cutoff_hour, minute=0, second=0, microsecond=0)


def previous_month_start(start: datetime) -> datetime:
    last_of_previous = start - timedelta(days=1)
    return last_of_previous.replace(day=1)


def category_comparisons(
    entries: Iterable[Entry],
    activities: dict[str, Activity],
    now: datetime,
    cutoff_hour: int,
    tz: tzinfo | None = None,
) -> list[CategoryComparison]:
    """Month-to-date positive points per category against the same span last month."""

    today = day_start(now, cutoff_hour, tz)
    current_start = month_start(today, cutoff_hour)
    span = (today - current_start).days + 1
    current_days = set(day_sequence(current_start, span))
    previous_days = set(day_sequence(previous_month_start(current_start), span))

    current: dict[str, float] = defaultdict(float)
    previous: dict[str, float] = defaultdict(float)
    for entry in entries:
        activity = activities.get(entry.activity_id)
        if activity is None or not activity.show_on_stats or entry.computed_points <= 0:
            continue
        bucket = day_start(entry.timestamp, cutoff_hour, tz)
        if bucket in current_days:
            current[activity.category] += entry.computed_points
        elif bucket in previous_days:
            previous[activity.category] += entry.computed_points

    categories = sorted(set(current) | set(previous))
    return [CategoryComparison(category, current.get(category, 0.0), previous.get(category, 0.0)) for category in categories]


class ScoreAggregator:
    """Reads entries from the store and buckets them into app-day totals."""

    def __init__(self, store: RecordStore, tz: tzinfo | None = None):
        self._store = store
        self._tz = tz

    def daily_totals(self, start: datetime, end: datetime, cutoff_hour: int) -> list[DailyScore]:
        """Sparse totals for every app-day touched by ``[start, end]``, sorted by day."""

        lower = day_range(start, cutoff_hour, self._tz)[0]
        upper = day_range(end, cutoff_hour, self._tz)[1]
        entries = self._store.query_entries(start=lower, end=upper)
        totals = daily_totals(entries, cutoff_hour, self._tz)
        return [DailyScore(day_start=day, total_points=total) for day, total in sorted(totals.items())]
