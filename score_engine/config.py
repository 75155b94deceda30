"""Environment-driven engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from score_engine.day_boundary import validate_cutoff_hour
from score_engine.errors import InvalidConfiguration

DEFAULT_CUTOFF_HOUR = 4
DEFAULT_MIN_SAMPLES = 20
DEFAULT_MIN_STRENGTH = 0.5
DEFAULT_WINDOW_DAYS = 60


@dataclass
class EngineConfig:
    """Settings consumed by the engine; preferences may override the cutoff."""

    cutoff_hour: int = DEFAULT_CUTOFF_HOUR
    timezone: Optional[tzinfo] = None
    correlation_min_samples: int = DEFAULT_MIN_SAMPLES
    correlation_min_strength: float = DEFAULT_MIN_STRENGTH
    correlation_window_days: int = DEFAULT_WINDOW_DAYS

    def __post_init__(self) -> None:
        validate_cutoff_hour(self.cutoff_hour)
        if self.correlation_min_samples < 2:
            raise InvalidConfiguration("correlation_min_samples must be at least 2")
        if not 0.0 <= self.correlation_min_strength <= 1.0:
            raise InvalidConfiguration("correlation_min_strength must be within 0-1")
        if self.correlation_window_days < 1:
            raise InvalidConfiguration("correlation_window_days must be positive")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidConfiguration(f"{name} must be an integer, got '{raw}'") from exc


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise InvalidConfiguration(f"{name} must be a number, got '{raw}'") from exc


def _timezone_env(name: str) -> Optional[tzinfo]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidConfiguration(f"{name}: unknown timezone '{raw}'") from exc


def load_config() -> EngineConfig:
    """Build an ``EngineConfig`` from ``SCORE_ENGINE_*`` environment variables."""

    load_dotenv()
    return EngineConfig(
        cutoff_hour=_int_env("SCORE_ENGINE_CUTOFF_HOUR", DEFAULT_CUTOFF_HOUR),
        timezone=_timezone_env("SCORE_ENGINE_TIMEZONE"),
        correlation_min_samples=_int_env("SCORE_ENGINE_CORRELATION_MIN_SAMPLES", DEFAULT_MIN_SAMPLES),
        correlation_min_strength=_float_env("SCORE_ENGINE_CORRELATION_MIN_STRENGTH", DEFAULT_MIN_STRENGTH),
        correlation_window_days=_int_env("SCORE_ENGINE_CORRELATION_WINDOW_DAYS", DEFAULT_WINDOW_DAYS),
    )
