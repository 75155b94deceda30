"""App-day boundaries offset from midnight by a cutoff hour."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo

from score_engine.errors import InvalidConfiguration


def validate_cutoff_hour(cutoff_hour: int) -> int:
    """Return the cutoff hour unchanged or raise if it is not an int in 0-23."""

    if isinstance(cutoff_hour, bool) or not isinstance(cutoff_hour, int):
        raise InvalidConfiguration(f"Cutoff hour must be an integer, got {cutoff_hour!r}")
    if not 0 <= cutoff_hour <= 23:
        raise InvalidConfiguration(f"Cutoff hour must be within 0-23, got {cutoff_hour}")
    return cutoff_hour


def localize(instant: datetime, tz: tzinfo | None) -> datetime:
    """Attach ``tz`` to a naive instant or convert an aware one. No-op without a zone."""

    if tz is None:
        return instant
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def _boundary(day: date, cutoff_hour: int, zone: tzinfo | None) -> datetime:
    return datetime.combine(day, time(hour=cutoff_hour), tzinfo=zone)


def day_range(instant: datetime, cutoff_hour: int, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Return the half-open app-day ``[start, end)`` containing ``instant``.

    The instant is shifted back by ``cutoff_hour`` hours, truncated to its
    calendar day, and the cutoff is added back. Arithmetic is done on the wall
    clock of ``tz`` (or the instant's own zone), so a day that crosses a DST
    change still starts and ends at the cutoff hour.
    """

    validate_cutoff_hour(cutoff_hour)
    local = localize(instant, tz)
    zone = local.tzinfo

    shifted = local.replace(tzinfo=None) - timedelta(hours=cutoff_hour)
    day = shifted.date()
    return _boundary(day, cutoff_hour, zone), _boundary(day + timedelta(days=1), cutoff_hour, zone)


def day_start(instant: datetime, cutoff_hour: int, tz: tzinfo | None = None) -> datetime:
    return day_range(instant, cutoff_hour, tz)[0]


def day_sequence(start: datetime, count: int) -> list[datetime]:
    """Consecutive app-day starts beginning at ``start`` (wall-clock days)."""

    if count <= 0:
        return []
    return [start + timedelta(days=offset) for offset in range(count)]


def trailing_days(now: datetime, count: int, cutoff_hour: int, tz: tzinfo | None = None) -> list[datetime]:
    """The ``count`` app-day starts ending with the app-day containing ``now``."""

    today = day_start(now, cutoff_hour, tz)
    return day_sequence(today - timedelta(days=count - 1), count) if count > 0 else []
