"""Facade wiring the ledger, aggregator, suggestions and correlation analyzer."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from score_engine.aggregation import (
    ScoreAggregator,
    category_comparisons,
    daily_totals,
    dense_series,
    month_start,
    per_activity_totals,
    previous_month_start,
)
from score_engine.catalog import ActivityCatalog
from score_engine.config import EngineConfig
from score_engine.correlation import CorrelationAnalyzer, CorrelationSink, Window, best_improvement
from score_engine.day_boundary import day_range, localize, trailing_days
from score_engine.ledger import EntryLedger
from score_engine.preferences import PreferencesService
from score_engine.schema import (
    Activity,
    AppendResult,
    CategoryComparison,
    CorrelationInsight,
    DailyScore,
    Entry,
    Preferences,
    Suggestion,
)
from score_engine.store import RecordStore
from score_engine.suggestions import SuggestionEngine


class ScoreEngine:
    """Entry point for callers. All collaborators are injected, nothing is global."""

    def __init__(
        self,
        store: RecordStore,
        config: Optional[EngineConfig] = None,
        correlation_sink: Optional[CorrelationSink] = None,
    ):
        self.config = config or EngineConfig()
        self.store = store
        self.preferences = PreferencesService(store)
        self.catalog = ActivityCatalog(store)
        self.ledger = EntryLedger(store, cutoff_provider=self.preferences.cutoff_hour, tz=self.config.timezone)
        self.aggregator = ScoreAggregator(store, tz=self.config.timezone)
        self.suggestion_engine = SuggestionEngine(tz=self.config.timezone)
        self.analyzer = CorrelationAnalyzer(
            sink=correlation_sink,
            min_samples=self.config.correlation_min_samples,
            min_strength=self.config.correlation_min_strength,
        )

    @classmethod
    def with_config_cutoff(cls, store: RecordStore, config: EngineConfig, **kwargs) -> "ScoreEngine":
        """Create an engine whose stored preferences start at ``config.cutoff_hour``."""

        preferences = store.get_preferences()
        if preferences.day_cutoff_hour != config.cutoff_hour:
            preferences.day_cutoff_hour = config.cutoff_hour
            store.save_preferences(preferences)
        return cls(store, config=config, **kwargs)

    def cutoff_hour(self) -> int:
        return self.preferences.cutoff_hour()

    def update_preferences(self, preferences: Preferences) -> Preferences:
        return self.preferences.update_preferences(preferences)

    def day_range(self, instant: datetime, cutoff_hour: Optional[int] = None) -> tuple[datetime, datetime]:
        cutoff = self.cutoff_hour() if cutoff_hour is None else cutoff_hour
        return day_range(instant, cutoff, self.config.timezone)

    def append_entry(
        self,
        activity_id: str,
        timestamp: datetime,
        amount: float,
        note: Optional[str] = None,
    ) -> AppendResult:
        return self.ledger.append(activity_id, timestamp, amount, note)

    def delete_entry(self, entry_id: str) -> None:
        self.ledger.delete(entry_id)

    def daily_totals(self, start: datetime, end: datetime, cutoff_hour: Optional[int] = None) -> list[DailyScore]:
        cutoff = self.cutoff_hour() if cutoff_hour is None else cutoff_hour
        return self.aggregator.daily_totals(start, end, cutoff)

    def suggestions(
        self,
        activities: Optional[list[Activity]] = None,
        entries: Optional[Iterable[Entry]] = None,
        cutoff_hour: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> list[Suggestion]:
        """Suggestions for the app-day containing ``now``; reads the store for omitted inputs."""

        now = now or datetime.now(self.config.timezone)
        cutoff = self.cutoff_hour() if cutoff_hour is None else cutoff_hour
        if activities is None:
            activities = self.catalog.list()
        if entries is None:
            start, end = self.day_range(now, cutoff)
            entries = self.ledger.query(start=start, end=end)
        return self.suggestion_engine.suggest(activities, entries, cutoff, now)

    def correlation_insight(
        self,
        activity: Activity,
        daily_series: dict[datetime, float],
        net_series: dict[datetime, float],
        window: Optional[Window] = None,
    ) -> Optional[CorrelationInsight]:
        window = self.config.correlation_window_days if window is None else window
        return self.analyzer.correlation_insight(activity, daily_series, net_series, window)

    def best_improvement(self, comparisons: Iterable[CategoryComparison]) -> Optional[tuple[str, float]]:
        return best_improvement(comparisons)

    def stats_insights(self, now: datetime) -> dict:
        """Correlation and month-over-month insights as of ``now``."""

        cutoff = self.cutoff_hour()
        tz = self.config.timezone
        days = trailing_days(now, self.config.correlation_window_days, cutoff, tz)
        today = day_range(now, cutoff, tz)[0]
        lookback = min(days[0], previous_month_start(month_start(today, cutoff)))
        entries = self.ledger.query(start=lookback)
        activities = {a.id: a for a in self.catalog.list(include_archived=True)}

        window_entries = [e for e in entries if localize(e.timestamp, tz) >= days[0]]
        net = daily_totals(window_entries, cutoff, tz)
        positive = per_activity_totals(window_entries, cutoff, tz, sign=1)
        # days without a log count as zero engagement
        engagement = {
            activity_id: {point.day_start: point.value for point in dense_series(positive.get(activity_id, {}), days)}
            for activity_id in activities
        }
        correlation = self.analyzer.strongest_insight(activities.values(), engagement, net, window=days)

        comparisons = category_comparisons(entries, activities, now, cutoff, tz)
        return {
            "correlation": correlation,
            "best_improvement": best_improvement(comparisons),
        }
