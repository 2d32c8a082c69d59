"""Accumulator of distinct calendar days with a working-day flag."""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Iterator

from office_days.models import CalendarDay
from office_days.timeutils import is_working_day, local_date


class DaySet:
    """Distinct calendar days on which a match occurred.

    Timestamps are truncated to their calendar date in tz (the process local
    timezone when tz is None). Inserting the same day twice is a no-op.
    """

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz
        self._days: dict[date, bool] = {}

    def insert(self, ts: datetime) -> CalendarDay:
        """Record the calendar day of ts and return its entry."""

        day = local_date(ts, self._tz)
        working = self._days.setdefault(day, is_working_day(day))
        return CalendarDay(day=day, is_working_day=working)

    def size(self) -> int:
        return len(self._days)

    def working_day_count(self) -> int:
        return sum(1 for working in self._days.values() if working)

    def weekend_day_count(self) -> int:
        return self.size() - self.working_day_count()

    def entries(self) -> list[CalendarDay]:
        """All days as CalendarDay, ascending."""

        return [CalendarDay(day=d, is_working_day=self._days[d]) for d in sorted(self._days)]

    def to_sorted_list(self) -> list[str]:
        """ISO dates (YYYY-MM-DD), ascending."""

        return sorted(d.isoformat() for d in self._days)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, item: object) -> bool:
        if isinstance(item, datetime):
            item = local_date(item, self._tz)
        if isinstance(item, str):
            try:
                item = date.fromisoformat(item)
            except ValueError:
                return False
        return item in self._days

    def __iter__(self) -> Iterator[CalendarDay]:
        return iter(self.entries())
