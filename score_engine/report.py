"""JSON-friendly summary of an engine's state, for scripts and demos."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

from score_engine.aggregation import contribution_slices, dense_series, per_activity_totals
from score_engine.correlation import comparative_message
from score_engine.day_boundary import localize, trailing_days
from score_engine.engine import ScoreEngine
from score_engine.store import InMemoryStore


def load_engine(activities: list, entries: list, cutoff_hour: int | None = None, **kwargs) -> ScoreEngine:
    """Build an engine over an in-memory store seeded with imported records."""

    store = InMemoryStore()
    for activity in activities:
        activity.validate()
        store.save_activity(activity)
    engine = ScoreEngine(store, **kwargs)
    tz = engine.config.timezone
    for entry in entries:
        store.insert_entry(replace(entry, timestamp=localize(entry.timestamp, tz)))

    if cutoff_hour is not None:
        preferences = engine.preferences.get()
        preferences.day_cutoff_hour = cutoff_hour
        engine.update_preferences(preferences)
    return engine


def build_report(engine: ScoreEngine, now: datetime, days: int = 7) -> dict:
    """Daily net series, contributions, suggestions and insights as plain values."""

    cutoff = engine.cutoff_hour()
    tz = engine.config.timezone
    day_starts = trailing_days(now, days, cutoff, tz)
    totals = {score.day_start: score.total_points for score in engine.daily_totals(day_starts[0], now)}
    series = dense_series(totals, day_starts)

    activities = {a.id: a for a in engine.catalog.list(include_archived=True)}
    entries = engine.ledger.query(start=day_starts[0], end=day_starts[-1] + timedelta(days=1))
    positive = per_activity_totals(entries, cutoff, tz, sign=1)
    negative = per_activity_totals(entries, cutoff, tz, sign=-1)
    shown = {activity_id: a for activity_id, a in activities.items() if a.show_on_stats}

    insights = engine.stats_insights(now)
    correlation = insights["correlation"]
    best = insights["best_improvement"]

    return {
        "cutoff_hour": cutoff,
        "daily_net": [{"day_start": point.day_start.isoformat(), "value": point.value} for point in series],
        "positive_slices": [
            {"label": s.label, "value": s.value, "percentage": s.percentage}
            for s in contribution_slices({k: sum(v.values()) for k, v in positive.items()}, shown)
        ],
        "negative_slices": [
            {"label": s.label, "value": s.value, "percentage": s.percentage}
            for s in contribution_slices({k: sum(v.values()) for k, v in negative.items()}, shown)
        ],
        "suggestions": [
            {"kind": s.kind, "title": s.title, "activity": activities[s.activity_id].name}
            for s in engine.suggestions(now=now)
        ],
        "correlation": None
        if correlation is None
        else {
            "activity": correlation.activity_name,
            "coefficient": correlation.coefficient,
            "samples": correlation.sample_count,
            "message": correlation.message,
        },
        "comparison": comparative_message(best),
    }
