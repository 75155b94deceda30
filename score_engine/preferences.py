"""Explicit preference reads and writes."""

from __future__ import annotations

from dataclasses import replace

from score_engine.day_boundary import validate_cutoff_hour
from score_engine.schema import Preferences
from score_engine.store import RecordStore


class PreferencesService:
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self) -> Preferences:
        return self._store.get_preferences()

    def cutoff_hour(self) -> int:
        return self._store.get_preferences().day_cutoff_hour

    def update_preferences(self, preferences: Preferences) -> Preferences:
        """Validate and persist ``preferences`` synchronously, returning the stored copy."""

        validate_cutoff_hour(preferences.day_cutoff_hour)
        stored = replace(preferences)
        self._store.save_preferences(stored)
        return stored
