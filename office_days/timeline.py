"""Decoding of location-history exports into visited places.

Two export formats are known:

  - "semanticSegments" (newer, exported from the device): segments with
    startTime/endTime and a timelinePath of textual "lat°, lon°" points.
  - "timelineObjects" (older Takeout): heterogeneous objects, of which only
    placeVisit entries carry a location, encoded as E7 integers.

Detection runs through a list of detectors, newest format first. Newer exports
may still carry legacy keys, so the first detector that matches wins.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Callable, ClassVar, Mapping, Sequence

from office_days.errors import DecodeError, FileOpenError
from office_days.models import VisitedPlace
from office_days.points import parse_point
from office_days.timeutils import parse_timestamp

logger = logging.getLogger(__name__)

E7_SCALE = 1e7


def _require_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DecodeError(f"{where}: expected an object, got {type(value).__name__}")
    return value


def _optional_list(value: Any, where: str) -> Sequence[Any]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise DecodeError(f"{where}: expected an array, got {type(value).__name__}")
    return value


def _timestamp(container: Mapping[str, Any], key: str, where: str) -> datetime:
    try:
        return parse_timestamp(container.get(key))
    except ValueError as exc:
        raise DecodeError(f"{where}.{key}: {exc}") from exc


def _e7(container: Mapping[str, Any], key: str, where: str) -> int:
    value = container.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"{where}.{key}: expected an integer, got {value!r}")
    # json accepts NaN and Infinity
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        raise DecodeError(f"{where}.{key}: expected an integer, got {value!r}")
    return int(value)


@dataclass(frozen=True, slots=True)
class SemanticSegmentsDocument:
    """Newer export: {"semanticSegments": [...]}."""

    segments: Sequence[Any]

    variant: ClassVar[str] = "semanticSegments"

    def places(self) -> list[VisitedPlace]:
        """One place per timelinePath point, inheriting the segment interval."""

        out: list[VisitedPlace] = []
        for i, raw in enumerate(self.segments):
            where = f"semanticSegments[{i}]"
            segment = _require_mapping(raw, where)
            path = _optional_list(segment.get("timelinePath"), f"{where}.timelinePath")
            if not path:
                # visit/activity segments carry no path
                continue

            start = _timestamp(segment, "startTime", where)
            end = _timestamp(segment, "endTime", where)
            for j, raw_point in enumerate(path):
                point = _require_mapping(raw_point, f"{where}.timelinePath[{j}]")
                text = point.get("point", "")
                if not isinstance(text, str):
                    raise DecodeError(f"{where}.timelinePath[{j}].point: expected a string, got {text!r}")
                lat, lon = parse_point(text)
                out.append(VisitedPlace(latitude=lat, longitude=lon, start=start, end=end))
        return out


@dataclass(frozen=True, slots=True)
class TimelineObjectsDocument:
    """Older export: {"timelineObjects": [{"placeVisit": {...}}, {"activitySegment": {...}}, ...]}."""

    objects: Sequence[Any]

    variant: ClassVar[str] = "timelineObjects"

    def places(self) -> list[VisitedPlace]:
        """One place per placeVisit entry; other entries are skipped."""

        out: list[VisitedPlace] = []
        for i, raw in enumerate(self.objects):
            where = f"timelineObjects[{i}]"
            entry = _require_mapping(raw, where)
            visit = entry.get("placeVisit")
            if visit is None:
                continue
            where = f"{where}.placeVisit"
            visit = _require_mapping(visit, where)

            lat_e7 = _e7(visit, "centerLatE7", where)
            lng_e7 = _e7(visit, "centerLngE7", where)
            if lat_e7 == 0 or lng_e7 == 0:
                # centerLatE7/centerLngE7 disappeared from exports in February 2024
                location = _require_mapping(visit.get("location") or {}, f"{where}.location")
                lat_e7 = _e7(location, "latitudeE7", f"{where}.location")
                lng_e7 = _e7(location, "longitudeE7", f"{where}.location")

            duration = _require_mapping(visit.get("duration"), f"{where}.duration")
            out.append(
                VisitedPlace(
                    latitude=lat_e7 / E7_SCALE,
                    longitude=lng_e7 / E7_SCALE,
                    start=_timestamp(duration, "startTimestamp", f"{where}.duration"),
                    end=_timestamp(duration, "endTimestamp", f"{where}.duration"),
                )
            )
        return out


TimelineDocument = SemanticSegmentsDocument | TimelineObjectsDocument

SchemaDetector = Callable[[Mapping[str, Any]], TimelineDocument | None]


def _detect_semantic_segments(doc: Mapping[str, Any]) -> SemanticSegmentsDocument | None:
    segments = doc.get("semanticSegments")
    if segments is None:
        return None
    return SemanticSegmentsDocument(_optional_list(segments, "semanticSegments"))


def _detect_timeline_objects(doc: Mapping[str, Any]) -> TimelineObjectsDocument:
    # Fallback format: a document without timelineObjects is simply empty.
    return TimelineObjectsDocument(_optional_list(doc.get("timelineObjects"), "timelineObjects"))


_DETECTORS: list[SchemaDetector] = [_detect_semantic_segments, _detect_timeline_objects]


def register_schema(detector: SchemaDetector) -> None:
    """Register a detector for a new export format.

    New detectors run before the built-in ones, so a newer format wins over
    legacy keys it may still carry. A detector returns None when the document
    is not in its format.
    """

    _DETECTORS.insert(0, detector)


def decode_timeline(obj: Any) -> TimelineDocument:
    """Detect the export format of an already-parsed JSON value.

    Raises:
        DecodeError: If obj is not a JSON object or has the wrong shape.
    """

    doc = _require_mapping(obj, "document")
    for detect in _DETECTORS:
        decoded = detect(doc)
        if decoded is not None:
            return decoded
    raise DecodeError("document matches no known export format")


def normalize(source: str | bytes | IO[str] | IO[bytes]) -> list[VisitedPlace]:
    """Decode a raw export into visited places, preserving source order.

    Args:
        source: JSON text/bytes or a readable file object.

    Raises:
        DecodeError: On malformed JSON, read failures or unexpected structure.
    """

    return _decode(source).places()


def _decode(source: str | bytes | IO[str] | IO[bytes]) -> TimelineDocument:
    try:
        if isinstance(source, (str, bytes)):
            obj = json.loads(source)
        else:
            obj = json.load(source)
    except (ValueError, OSError, RecursionError) as exc:  # JSONDecodeError and UnicodeDecodeError are ValueErrors
        raise DecodeError(f"decoding JSON: {exc}") from exc
    return decode_timeline(obj)


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Quick summary of decoding one export file."""

    path: Path
    variant: str
    places: int


def load_visited_places(path: str | Path) -> tuple[list[VisitedPlace], LoadSummary]:
    """Load all visited places of one export file into memory.

    Args:
        path: Path to a JSON export.

    Returns:
        (places, summary)

    Raises:
        FileOpenError: If the file cannot be opened.
        DecodeError: If the content cannot be decoded.
    """

    p = Path(path)
    try:
        f = p.open("rb")
    except OSError as exc:
        raise FileOpenError(p, exc) from exc

    with f:
        document = _decode(f)
    places = document.places()

    summary = LoadSummary(path=p, variant=document.variant, places=len(places))
    logger.debug("Decoded %s as %s with %s places", p, summary.variant, summary.places)
    return places, summary
