"""Matching of visited places against a reference point and time range."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, MutableMapping

from office_days.days import DaySet
from office_days.errors import DecodeError, FileOpenError
from office_days.geo import is_within_radius
from office_days.models import GeoPoint, TimeRange, VisitedPlace
from office_days.timeline import load_visited_places

logger = logging.getLogger(__name__)


class FileLogger(logging.LoggerAdapter):
    """Prefix every message with the file being processed."""

    def process(self, msg: object, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        return f"[{self.extra['file']}] {msg}", kwargs


@dataclass(frozen=True, slots=True)
class MatchStats:
    """Counters of one matching pass.

    Attributes:
        places: Places read.
        candidates: Places (partially) within the time range.
        matches: Candidates within the tolerance radius.
    """

    places: int
    candidates: int
    matches: int


@dataclass(frozen=True, slots=True)
class FileStats:
    """Outcome of processing one export file."""

    path: Path
    variant: str | None
    places: int
    candidates: int
    matches: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def match_places(
    places: Iterable[VisitedPlace],
    time_range: TimeRange,
    reference: GeoPoint,
    tolerance_m: float,
    days: DaySet,
) -> MatchStats:
    """Feed the start of every matching place into days.

    A place is a candidate when its interval overlaps time_range. The input
    is usually sorted by time, but this is not relied upon: every place is
    checked.

    Args:
        places: Visited places, any order.
        time_range: Inclusive time range.
        reference: Reference point (e.g. the office).
        tolerance_m: Radius around reference in meters.
        days: Day set, mutated in place.

    Returns:
        Counters for observability.
    """

    total = 0
    candidates = 0
    matches = 0
    for place in places:
        total += 1
        if not time_range.overlaps(place.start, place.end):
            continue

        candidates += 1
        if is_within_radius(place.point, reference, tolerance_m):
            days.insert(place.start)
            matches += 1

    return MatchStats(places=total, candidates=candidates, matches=matches)


def process_file(
    path: str | Path,
    time_range: TimeRange,
    reference: GeoPoint,
    tolerance_m: float,
    days: DaySet,
    *,
    log: logging.Logger | logging.LoggerAdapter | None = None,
) -> FileStats:
    """Decode one export file and match its places into days.

    Open and decode failures are logged and the file contributes nothing;
    they never propagate.
    """

    p = Path(path)
    file_log = FileLogger(log or logger, {"file": str(p)})

    try:
        places, summary = load_visited_places(p)
    except FileOpenError as exc:
        file_log.error("Could not open file: %s", exc.cause)
        return FileStats(path=p, variant=None, places=0, candidates=0, matches=0, error=str(exc))
    except DecodeError as exc:
        file_log.error("Could not parse file: %s", exc)
        return FileStats(path=p, variant=None, places=0, candidates=0, matches=0, error=str(exc))

    stats = match_places(places, time_range, reference, tolerance_m, days)
    file_log.debug(
        "Found %d visits to places in file of which %d have been (partially) within the given time range",
        stats.places,
        stats.candidates,
    )
    return FileStats(
        path=p,
        variant=summary.variant,
        places=stats.places,
        candidates=stats.candidates,
        matches=stats.matches,
    )
