"""Core data schema for activities, entries and engine results."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from score_engine.errors import InvalidConfiguration

POLARITIES = ("positive", "negative")
UNIT_TYPES = ("count", "duration", "quantity", "boolean", "rating")


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Activity:
    """A user-defined trackable behaviour ("deed") with a point formula."""

    name: str
    polarity: str = "positive"
    unit_type: str = "count"
    points_per_unit: float = 1.0
    daily_cap: Optional[float] = None
    emoji: str = ""
    color_hex: str = "#FFFFFF"
    category: str = ""
    unit_label: str = ""
    is_private: bool = False
    show_on_stats: bool = True
    created_at: datetime = field(default_factory=datetime.now)
    is_archived: bool = False
    sort_order: int = -1
    id: str = field(default_factory=new_id)

    def validate(self) -> None:
        if self.polarity not in POLARITIES:
            raise InvalidConfiguration(f"Invalid polarity '{self.polarity}'")
        if self.unit_type not in UNIT_TYPES:
            raise InvalidConfiguration(f"Invalid unit type '{self.unit_type}'")
        if self.daily_cap is not None and self.daily_cap < 0:
            raise InvalidConfiguration(f"Daily cap must be >= 0, got {self.daily_cap}")


@dataclass(frozen=True)
class Entry:
    """One logged occurrence of an activity. Points are fixed at creation."""

    activity_id: str
    timestamp: datetime
    amount: float
    computed_points: float
    note: Optional[str] = None
    id: str = field(default_factory=new_id)


@dataclass
class Preferences:
    """Low-level app settings; only the cutoff hour matters to scoring."""

    day_cutoff_hour: int = 4
    haptics_on: bool = True
    sounds_on: bool = True
    accent_color_hex: Optional[str] = None


@dataclass(frozen=True)
class AppendResult:
    entry: Entry
    was_capped: bool


@dataclass(frozen=True)
class DailyScore:
    day_start: datetime
    total_points: float


@dataclass(frozen=True)
class DailyPoint:
    day_start: datetime
    value: float


SUGGESTION_TITLES = {
    "hydration": "Hydrate",
    "meditation": "Take a moment",
    "positivity": "Boost your mood",
}


@dataclass(frozen=True)
class Suggestion:
    kind: str
    activity_id: str

    @property
    def title(self) -> str:
        return SUGGESTION_TITLES[self.kind]


@dataclass(frozen=True)
class CorrelationInsight:
    activity_id: str
    activity_name: str
    coefficient: float
    sample_count: int
    message: str


@dataclass(frozen=True)
class CategoryComparison:
    category: str
    current: float
    previous: float


@dataclass(frozen=True)
class ContributionSlice:
    """Share of points one activity (or the "Others" bucket) contributed."""

    activity_id: Optional[str]
    emoji: str
    label: str
    value: float
    percentage: float
