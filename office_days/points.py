"""Parsing of textual coordinate pairs used by the semantic-segments export."""

from __future__ import annotations

import logging

from office_days.errors import PointParseError

logger = logging.getLogger(__name__)

DEGREE_SIGN = "°"


def _parse_coordinate(part: str, text: str, strict: bool) -> float:
    try:
        return float(part.strip())
    except ValueError as exc:
        if strict:
            raise PointParseError(f"could not parse coordinate {part!r} in {text!r}") from exc
        logger.warning("Could not parse coordinate %r in point %r, using 0", part, text)
        return 0.0


def parse_point(text: str, *, strict: bool = False) -> tuple[float, float]:
    """Parse "51.6503959°, 5.0492413°" into (latitude, longitude).

    Degree signs are stripped and the two halves split on the comma.

    Args:
        text: Coordinate pair text.
        strict: Raise instead of falling back to zero.

    Returns:
        (latitude, longitude) in decimal degrees. In lenient mode an
        unparseable half becomes 0.0 (so a missing separator yields a zero
        longitude) and a warning is logged.

    Raises:
        PointParseError: In strict mode, for any malformed input.
    """

    cleaned = text.replace(DEGREE_SIGN, "")
    parts = cleaned.split(",")
    if len(parts) != 2:
        if strict:
            raise PointParseError(f"expected 'lat°, lon°', got {text!r}")
        logger.warning("Malformed point %r, expected 'lat°, lon°'", text)
        parts = (parts + ["", ""])[:2]

    lat = _parse_coordinate(parts[0], text, strict)
    lon = _parse_coordinate(parts[1], text, strict)
    return lat, lon
