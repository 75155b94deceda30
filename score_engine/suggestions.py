"""Heuristic "what to log next" suggestions from today's entries."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Optional

from score_engine.day_boundary import day_range, localize
from score_engine.schema import Activity, Entry, Suggestion

MAX_SUGGESTIONS = 2

HYDRATION_KEYWORDS = ("water", "hydrate", "hydration", "drink")
HYDRATION_EMOJI = "💧"
HYDRATION_DAILY_TARGET = 2000.0
HYDRATION_MIN_SPACING = timedelta(minutes=75)

MEDITATION_KEYWORDS = ("meditat", "mindful", "breathe", "breath", "calm")

NEGATIVE_RECENT_WINDOW = timedelta(minutes=120)


def _matches(text: str, keywords: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def is_hydration_activity(activity: Activity) -> bool:
    if activity.polarity != "positive":
        return False
    if any(_matches(text, HYDRATION_KEYWORDS) for text in (activity.name, activity.unit_label, activity.category)):
        return True
    return HYDRATION_EMOJI in activity.emoji


def is_meditation_activity(activity: Activity) -> bool:
    if activity.polarity != "positive" or activity.unit_type != "duration":
        return False
    return _matches(activity.name, MEDITATION_KEYWORDS) or _matches(activity.category, MEDITATION_KEYWORDS)


class SuggestionEngine:
    """Derives up to two suggestions in fixed priority: hydration, meditation, positivity."""

    def __init__(self, tz: tzinfo | None = None):
        self._tz = tz

    def suggest(
        self,
        activities: list[Activity],
        entries: Iterable[Entry],
        cutoff_hour: int,
        now: datetime,
    ) -> list[Suggestion]:
        """Return at most two suggestions, never naming the same activity twice."""

        catalog = [activity for activity in activities if not activity.is_archived]
        if not catalog:
            return []

        now = localize(now, self._tz)
        start, end = day_range(now, cutoff_hour, self._tz)
        local = (replace(e, timestamp=localize(e.timestamp, self._tz)) for e in entries)
        todays = sorted((e for e in local if start <= e.timestamp < end), key=lambda e: e.timestamp)
        by_activity: dict[str, list[Entry]] = defaultdict(list)
        for entry in todays:
            by_activity[entry.activity_id].append(entry)

        results: list[Suggestion] = []
        used: set[str] = set()
        rules = (
            lambda: self._hydration(catalog, by_activity, now, used),
            lambda: self._meditation(catalog, by_activity, used),
            lambda: self._positivity(catalog, todays, now, used),
        )
        for rule in rules:
            if len(results) >= MAX_SUGGESTIONS:
                break
            suggestion = rule()
            if suggestion is not None:
                results.append(suggestion)
                used.add(suggestion.activity_id)
        return results

    def _hydration(
        self,
        catalog: list[Activity],
        by_activity: dict[str, list[Entry]],
        now: datetime,
        used: set[str],
    ) -> Optional[Suggestion]:
        for activity in catalog:
            if activity.id in used or not is_hydration_activity(activity):
                continue
            logged = by_activity.get(activity.id, [])
            amount_today = sum(max(0.0, entry.amount) for entry in logged)
            if amount_today >= HYDRATION_DAILY_TARGET:
                continue
            if logged and now - logged[-1].timestamp < HYDRATION_MIN_SPACING:
                continue
            return Suggestion(kind="hydration", activity_id=activity.id)
        return None

    def _meditation(
        self,
        catalog: list[Activity],
        by_activity: dict[str, list[Entry]],
        used: set[str],
    ) -> Optional[Suggestion]:
        for activity in catalog:
            if activity.id in used or not is_meditation_activity(activity):
                continue
            if not by_activity.get(activity.id):
                return Suggestion(kind="meditation", activity_id=activity.id)
        return None

    def _positivity(
        self,
        catalog: list[Activity],
        todays: list[Entry],
        now: datetime,
        used: set[str],
    ) -> Optional[Suggestion]:
        negatives = [entry for entry in todays if entry.computed_points < 0]
        if not negatives:
            return None
        latest_negative = negatives[-1]
        if now - latest_negative.timestamp > NEGATIVE_RECENT_WINDOW:
            return None
        if any(entry.computed_points > 0 and entry.timestamp > latest_negative.timestamp for entry in todays):
            return None

        for activity in catalog:
            if activity.id not in used and activity.polarity == "positive":
                return Suggestion(kind="positivity", activity_id=activity.id)
        return None
