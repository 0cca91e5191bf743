"""Derived forecast views: daily buckets and the hourly slice."""

from dataclasses import dataclass, field

from skycast.models.weather import ForecastPoint


@dataclass(frozen=True)
class DailyBucket:
    date: str  # YYYY-MM-DD
    label: str
    representative: ForecastPoint
    min_temp: float
    max_temp: float
    points: tuple[ForecastPoint, ...]


@dataclass(frozen=True)
class HourlySlot:
    point: ForecastPoint
    day_label: str
    time_label: str


@dataclass(frozen=True)
class ForecastSummary:
    days: list[DailyBucket] = field(default_factory=list)
    hourly: list[HourlySlot] = field(default_factory=list)
