"""
Reporting period resolution.

Responsibilities:
- Map (kind, reference date) to an inclusive [start, end] range.
- Produce display labels for a period.

Non-Responsibilities:
- No record filtering.

Invariant:
Results depend only on the inputs; the same (kind, date) always resolves
to the same range.
"""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import NamedTuple, Union

DateLike = Union[date, datetime]


class PeriodKind(str, Enum):
    DAY = "day"
    WEEK = "week"
    BIWEEKLY = "biweekly"
    MONTH = "month"


class Period(NamedTuple):
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def _end_of_day(d: date) -> datetime:
    # 23:59:59.999, millisecond precision like the stored timestamps
    return datetime.combine(d, time(23, 59, 59, 999000))


def _sunday_on_or_before(d: date) -> date:
    # weekday(): Monday=0 .. Sunday=6
    return d - timedelta(days=(d.weekday() + 1) % 7)


def _last_day_of_month(d: date) -> date:
    if d.month == 12:
        first_next = date(d.year + 1, 1, 1)
    else:
        first_next = date(d.year, d.month + 1, 1)
    return first_next - timedelta(days=1)


def resolve_period(kind: Union[str, PeriodKind], reference_date: DateLike) -> Period:
    """
    Resolve a reporting period around a reference date.

    Args:
        kind: day, week, biweekly or month
        reference_date: date (or datetime; only the calendar day is used)

    Returns:
        Period with start at 00:00:00.000 and end at 23:59:59.999

    Notes:
        Biweekly buckets are anchored on the 1st of the reference month:
        the week number is the day-of-month of the Sunday on/before the
        reference date, integer-divided by 14. When that Sunday falls in
        the previous month the bucket can start after the reference date.
    """
    kind = PeriodKind(kind)
    ref = _as_date(reference_date)

    if kind is PeriodKind.DAY:
        start = end = ref
    elif kind is PeriodKind.WEEK:
        start = _sunday_on_or_before(ref)
        end = start + timedelta(days=6)
    elif kind is PeriodKind.BIWEEKLY:
        week_start = _sunday_on_or_before(ref)
        week_number = week_start.day // 14
        start = date(ref.year, ref.month, 1) + timedelta(days=week_number * 14)
        end = start + timedelta(days=13)
    else:
        start = date(ref.year, ref.month, 1)
        end = _last_day_of_month(ref)

    return Period(_start_of_day(start), _end_of_day(end))


def period_label(kind: Union[str, PeriodKind], reference_date: DateLike) -> str:
    """Label such as 'Biweekly - 1/20/2025'."""
    kind = PeriodKind(kind)
    ref = _as_date(reference_date)
    return f"{kind.value.capitalize()} - {ref.month}/{ref.day}/{ref.year}"
