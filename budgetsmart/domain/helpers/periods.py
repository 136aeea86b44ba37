from calendar import monthrange
from datetime import datetime
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

from budgetsmart.domain.models import MONTH_NAMES, Period, TimePeriod

PERIOD_OFFSETS = {
    TimePeriod.LAST_MONTH: relativedelta(months=1),
    TimePeriod.LAST_3_MONTHS: relativedelta(months=3),
    TimePeriod.LAST_6_MONTHS: relativedelta(months=6),
    TimePeriod.LAST_YEAR: relativedelta(years=1),
}


def shift_period(period: Period, offset: int) -> Period:
    """
    Move ``offset`` months forward (or backward when negative).
    Raises ValueError when the result falls outside years 1..9999.
    """
    moved = datetime(period.year, period.month + 1, 1) + relativedelta(months=offset)
    return Period.of(moved)


def month_year_label(period: Period) -> str:
    return f"{MONTH_NAMES[period.month]} {period.year}"


def period_bounds(month: int, year: int) -> Tuple[datetime, datetime]:
    """
    First and last instant of a 0-based month, both inclusive.
    """
    period = Period(month=month, year=year)
    calendar_month = period.month + 1
    start = datetime(period.year, calendar_month, 1)
    last_day = monthrange(period.year, calendar_month)[1]
    end = datetime(period.year, calendar_month, last_day, 23, 59, 59, 999999)
    return start, end


def resolve_date_range(
    time_period: TimePeriod,
    now: Optional[datetime] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Tuple[datetime, datetime]:
    """
    Turn a report time period into a concrete [start, end] window ending now.
    CUSTOM windows are supplied by the caller and only validated here.
    """
    if time_period == TimePeriod.CUSTOM:
        if start is None or end is None:
            raise ValueError("Custom period requires both start_date and end_date")
        if start > end:
            raise ValueError("start_date must not be after end_date")
        return start, end
    end_date = now or datetime.now()
    return end_date - PERIOD_OFFSETS[time_period], end_date


def in_range(moment: datetime, start: datetime, end: datetime) -> bool:
    return start <= moment <= end


def as_local_naive(moment: Optional[datetime]) -> Optional[datetime]:
    # stored dates are naive local time
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)
