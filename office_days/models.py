"""Data models for visited places, time ranges and calendar days."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Final


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class VisitedPlace:
    """A single location observation normalized from a timeline export.

    Attributes:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        start: Start of the visit, timezone-aware.
        end: End of the visit, timezone-aware. Usually >= start, but malformed
            exports may violate this and nothing here enforces it.
    """

    latitude: float
    longitude: float
    start: datetime
    end: datetime

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class TimeRange:
    """An inclusive [start, end] time range."""

    start: datetime
    end: datetime

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Check whether the interval [start, end] touches this range.

        A visit partially overlapping either boundary still counts.
        """

        return not (end < self.start or start > self.end)


@dataclass(frozen=True, slots=True)
class CalendarDay:
    """A calendar day on which at least one match occurred."""

    day: date
    is_working_day: bool

    @property
    def iso(self) -> str:
        return self.day.isoformat()


DEFAULT_TOLERANCE_M: Final[float] = 1000.0

# Mean Earth radius (IUGG), matching common haversine implementations.
EARTH_RADIUS_M: Final[float] = 6_371_008.8

WEEKEND_WEEKDAYS: Final[frozenset[int]] = frozenset({5, 6})
