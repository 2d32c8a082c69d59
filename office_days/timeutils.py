"""Time parsing and calendar-day utilities."""

from __future__ import annotations

from datetime import date, datetime, tzinfo

from zoneinfo import ZoneInfo

from office_days.errors import ArgumentParseError
from office_days.models import WEEKEND_WEEKDAYS


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Europe/Amsterdam".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"invalid timezone: {tz_name!r}, e.g. Europe/Amsterdam") from exc


def localize(dt: datetime, tz: tzinfo | None = None) -> datetime:
    """Attach a timezone to naive datetimes, convert aware ones.

    With tz=None the process local timezone is used (DST-aware).
    """

    if dt.tzinfo is None:
        if tz is None:
            return dt.astimezone()
        return dt.replace(tzinfo=tz)
    if tz is None:
        return dt.astimezone()
    return dt.astimezone(tz)


def parse_dt(text: str, tz: tzinfo | None = None) -> datetime:
    """Parse user-provided datetime text to a timezone-aware datetime.

    Supported formats:
      - RFC 3339, e.g. "2022-01-01T00:00:00+01:00" or "2022-01-01T00:00:00Z"
      - without offset, e.g. "2022-01-01T00:00:00" or "2022-01-01 00:00:00"
      - a bare date, e.g. "2022-01-01" (midnight)

    If the offset is missing, the text is read in tz (local time when None).
    An explicit offset is kept as given.

    Raises:
        ArgumentParseError: If text cannot be parsed.
    """

    s = text.strip()
    try:
        dt = datetime.fromisoformat(s)
    except ValueError as exc:
        raise ArgumentParseError(f"could not parse date {text!r}, expected e.g. 2022-01-01T00:00:00") from exc

    if dt.tzinfo is None:
        return localize(dt, tz)
    return dt


def parse_timestamp(value: object) -> datetime:
    """Parse a timestamp field of a timeline export.

    Exports use RFC 3339 strings such as "2022-01-01T10:00:00.123Z" or
    "2024-02-07T08:15:00.000+01:00". Naive values are read in local time.

    Raises:
        ValueError: If the value is missing, not a string, or unparseable.
    """

    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"expected a timestamp string, got {value!r}")
    dt = datetime.fromisoformat(value.strip())
    if dt.tzinfo is None:
        return localize(dt)
    return dt


def local_date(ts: datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of ts in tz (process local time when None)."""

    return localize(ts, tz).date()


def is_working_day(day: date) -> bool:
    """True unless the day is a Saturday or a Sunday."""

    return day.weekday() not in WEEKEND_WEEKDAYS
