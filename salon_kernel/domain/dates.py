"""
Dates -- day keys, day boundaries and reporting range presets.

Responsibility:
    Provide the ``YYYY-MM-DD`` key format used by the hours ledger, the
    start/end-of-day helpers used by transaction filtering, and the
    day/week/month/year presets offered by the reports screens.

Architecture position:
    Kernel > Domain -- pure functional core. Never reads the system clock;
    callers pass the anchor date explicitly.

Invariants enforced:
    - Day keys are zero-padded ISO dates, so lexicographic order equals
      chronological order.
    - ``DateRange`` is inclusive of both endpoints at time granularity and
      rejects ranges whose start is after their end.
    - Weeks start on Sunday.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

from salon_kernel.exceptions import InvalidDateRangeError, ValidationError


class RangePreset(str, Enum):
    """Reporting period presets."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


def day_key(value: date | datetime | str) -> str:
    """
    Normalise a date-like value to its ``YYYY-MM-DD`` key.

    Strings are validated (a full ISO timestamp is accepted and truncated to
    its date part).

    Raises:
        ValidationError: if a string is not an ISO date.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10]).isoformat()
        except ValueError as e:
            raise ValidationError(f"Invalid date: {value!r}", "date", value) from e
    raise ValidationError(f"Invalid date: {value!r}", "date", value)


def start_of_day(value: date | datetime) -> datetime:
    """Midnight at the start of the day, keeping any tzinfo."""
    if isinstance(value, datetime):
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime.combine(value, time.min)


def end_of_day(value: date | datetime) -> datetime:
    """Last representable instant of the day, keeping any tzinfo."""
    if isinstance(value, datetime):
        return value.replace(hour=23, minute=59, second=59, microsecond=999999)
    return datetime.combine(value, time.max)


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive time range.

    Contract:
        ``contains(ts)`` is true for ``start <= ts <= end``.
    Guarantees:
        - ``start <= end``.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidDateRangeError(self.start, self.end)

    @classmethod
    def from_dates(cls, start: date | datetime, end: date | datetime) -> DateRange:
        """Whole-day range from the start of ``start`` to the end of ``end``."""
        return cls(start=start_of_day(start), end=end_of_day(end))

    @classmethod
    def coerce(cls, start: date | datetime, end: date | datetime) -> DateRange:
        """
        Build a range from caller-supplied bounds.

        Plain dates widen to whole days; datetimes are taken as given.
        """
        lo = start if isinstance(start, datetime) else start_of_day(start)
        hi = end if isinstance(end, datetime) else end_of_day(end)
        return cls(start=lo, end=hi)

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    @property
    def start_key(self) -> str:
        return day_key(self.start)

    @property
    def end_key(self) -> str:
        return day_key(self.end)


def date_range_for(preset: RangePreset | str, anchor: date | datetime) -> DateRange:
    """
    Range covering the day, week, month or year containing ``anchor``.

    Weeks run Sunday to Saturday.
    """
    preset = RangePreset(preset)
    day = anchor.date() if isinstance(anchor, datetime) else anchor
    tz_anchor = anchor if isinstance(anchor, datetime) else None

    match preset:
        case RangePreset.DAY:
            first, last = day, day
        case RangePreset.WEEK:
            # date.weekday(): Monday == 0 ... Sunday == 6
            first = day - timedelta(days=(day.weekday() + 1) % 7)
            last = first + timedelta(days=6)
        case RangePreset.MONTH:
            first = day.replace(day=1)
            last = day.replace(day=calendar.monthrange(day.year, day.month)[1])
        case RangePreset.YEAR:
            first = date(day.year, 1, 1)
            last = date(day.year, 12, 31)

    if tz_anchor is not None and tz_anchor.tzinfo is not None:
        return DateRange(
            start=datetime.combine(first, time.min, tzinfo=tz_anchor.tzinfo),
            end=datetime.combine(last, time.max, tzinfo=tz_anchor.tzinfo),
        )
    return DateRange.from_dates(first, last)
