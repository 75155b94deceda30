"""Correlation and improvement insights over daily score series."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional, Sequence, Union

import numpy as np

from score_engine.config import DEFAULT_MIN_SAMPLES, DEFAULT_MIN_STRENGTH, DEFAULT_WINDOW_DAYS
from score_engine.schema import Activity, CategoryComparison, CorrelationInsight

log = logging.getLogger("score_engine.correlation")

CorrelationSink = Callable[[str, float, int], None]
Window = Union[int, Iterable[datetime]]


def pearson(x: Sequence[float], y: Sequence[float]) -> Optional[float]:
    """Pearson's r, or None when it is undefined (a flat series or < 2 points)."""

    if len(x) != len(y) or len(x) < 2:
        return None

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    if np.ptp(xs) == 0 or np.ptp(ys) == 0:
        return None
    return float(np.corrcoef(xs, ys)[0, 1])


def _window_days(window: Window, *series: dict[datetime, float]) -> set[datetime]:
    if not isinstance(window, int):
        return set(window)

    known = set().union(*(s.keys() for s in series))
    if not known or window <= 0:
        return set()
    latest = max(known)
    return {day for day in known if day > latest - timedelta(days=window)}


def insight_message(activity_name: str, coefficient: float) -> str:
    direction = "higher" if coefficient >= 0 else "lower"
    return f"You tend to score {direction} on days you {activity_name.lower()}"


class CorrelationAnalyzer:
    """Gates Pearson correlations behind sample-size and strength floors.

    Accepted results are reported to ``sink`` as ``(name, r, samples)``;
    rejected ones leave no trace.
    """

    def __init__(
        self,
        sink: Optional[CorrelationSink] = None,
        min_samples: int = DEFAULT_MIN_SAMPLES,
        min_strength: float = DEFAULT_MIN_STRENGTH,
    ):
        self.sink = sink
        self.min_samples = min_samples
        self.min_strength = min_strength

    def _evaluate(
        self,
        activity: Activity,
        daily_series: dict[datetime, float],
        net_series: dict[datetime, float],
        window: Window,
    ) -> Optional[CorrelationInsight]:
        days = _window_days(window, daily_series, net_series)
        overlap = sorted(day for day in days if day in daily_series and day in net_series)
        if len(overlap) < self.min_samples:
            return None

        engagement = [daily_series[day] for day in overlap]
        if not any(value != 0 for value in engagement):
            return None
        net = [net_series[day] for day in overlap]

        r = pearson(engagement, net)
        if r is None or abs(r) < self.min_strength:
            return None

        return CorrelationInsight(
            activity_id=activity.id,
            activity_name=activity.name,
            coefficient=r,
            sample_count=len(overlap),
            message=insight_message(activity.name, r),
        )

    def _report(self, insight: CorrelationInsight) -> None:
        log.info(
            "Correlation candidate for %s: r=%.4f, samples=%d",
            insight.activity_name,
            insight.coefficient,
            insight.sample_count,
        )
        if self.sink is not None:
            self.sink(insight.activity_name, insight.coefficient, insight.sample_count)

    def correlation_insight(
        self,
        activity: Activity,
        daily_series: dict[datetime, float],
        net_series: dict[datetime, float],
        window: Window = DEFAULT_WINDOW_DAYS,
    ) -> Optional[CorrelationInsight]:
        """Correlate an activity's daily engagement with the daily net score.

        Only days inside the trailing ``window`` (a day count, or explicit day
        starts) that appear in both series are used.
        """

        insight = self._evaluate(activity, daily_series, net_series, window)
        if insight is not None:
            self._report(insight)
        return insight

    def strongest_insight(
        self,
        activities: Iterable[Activity],
        per_activity_series: dict[str, dict[datetime, float]],
        net_series: dict[datetime, float],
        window: Window = DEFAULT_WINDOW_DAYS,
    ) -> Optional[CorrelationInsight]:
        """Strongest accepted insight across positive activities shown on stats."""

        if not isinstance(window, int):
            window = list(window)

        best: Optional[CorrelationInsight] = None
        for activity in activities:
            if activity.polarity != "positive" or not activity.show_on_stats:
                continue
            insight = self.correlation_insight(activity, per_activity_series.get(activity.id, {}), net_series, window)
            if insight is not None and (best is None or abs(insight.coefficient) > abs(best.coefficient)):
                best = insight
        return best


def best_improvement(comparisons: Iterable[CategoryComparison | tuple]) -> Optional[tuple[str, float]]:
    """Category with the largest relative gain; ``previous == 0`` is skipped."""

    best: Optional[tuple[str, float]] = None
    for comparison in comparisons:
        if not isinstance(comparison, CategoryComparison):
            comparison = CategoryComparison(*comparison)
        if comparison.previous <= 0:
            continue
        percent = (comparison.current - comparison.previous) / comparison.previous
        if best is None or percent > best[1]:
            best = (comparison.category, percent)
    return best


def comparative_message(best: Optional[tuple[str, float]]) -> Optional[str]:
    if best is None:
        return None
    category, percent = best
    if percent <= 0:
        return "You're slightly behind last month."
    return f"You're doing {percent:.0%} better than last month in {category}"
