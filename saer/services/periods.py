from __future__ import annotations

import calendar
import math
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Tuple, Union

from ..models.periods import AmountByPeriod, Period, PeriodType

MAX_WEEKS = 52

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

DateLike = Union[date, datetime, str]


def parse_date(value: DateLike) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
        except ValueError:
            try:
                return date.fromisoformat(raw[:10])
            except ValueError:
                return None
    return None


def week_number(day: date) -> int:
    """1-based week of the year; anything past week 52 folds into week 52."""
    days_since_start = (day - date(day.year, 1, 1)).days
    return min(math.ceil((days_since_start + 1) / 7), MAX_WEEKS)


def resolve_period_id(value: DateLike, periods: Sequence[Period]) -> Optional[str]:
    """Map a point in time to the id of its bucket in ``periods``.

    The granularity is read from the shape of the first period id
    (``week-``, ``month-``, ``quarter-`` or a bare year).
    """
    if not periods:
        return None
    day = parse_date(value)
    if day is None:
        return None

    first_id = periods[0].id
    if first_id.startswith("week-"):
        return f"week-{week_number(day)}"
    if first_id.startswith("month-"):
        return f"month-{day.month}"
    if first_id.startswith("quarter-"):
        return f"quarter-{(day.month - 1) // 3 + 1}"
    return str(day.year)


def initialize_empty_periods(periods: Sequence[Period]) -> AmountByPeriod:
    return {period.id: 0 for period in periods}


def _weekly_periods(year: int) -> List[Period]:
    start_of_year = date(year, 1, 1)
    periods: List[Period] = []
    for week in range(1, MAX_WEEKS + 1):
        start = start_of_year + timedelta(days=7 * (week - 1))
        end = start + timedelta(days=6) if week < MAX_WEEKS else date(year, 12, 31)
        periods.append(Period(id=f"week-{week}", label=f"W{week}", start_date=start, end_date=end))
    return periods


def _monthly_periods(year: int) -> List[Period]:
    periods: List[Period] = []
    for month in range(1, 13):
        last_day = calendar.monthrange(year, month)[1]
        periods.append(
            Period(
                id=f"month-{month}",
                label=MONTH_LABELS[month - 1],
                start_date=date(year, month, 1),
                end_date=date(year, month, last_day),
            )
        )
    return periods


def _quarterly_periods(year: int) -> List[Period]:
    periods: List[Period] = []
    for quarter in range(1, 5):
        first_month = (quarter - 1) * 3 + 1
        last_month = first_month + 2
        periods.append(
            Period(
                id=f"quarter-{quarter}",
                label=f"Q{quarter}",
                start_date=date(year, first_month, 1),
                end_date=date(year, last_month, calendar.monthrange(year, last_month)[1]),
            )
        )
    return periods


def generate_periods(period_type: PeriodType, year: int) -> List[Period]:
    if period_type == "weekly":
        return _weekly_periods(year)
    if period_type == "monthly":
        return _monthly_periods(year)
    if period_type == "quarterly":
        return _quarterly_periods(year)
    if period_type == "annual":
        return [Period(id=str(year), label=str(year), start_date=date(year, 1, 1), end_date=date(year, 12, 31))]
    raise ValueError(f"Unsupported period type: {period_type}")


def period_range(year: int) -> Tuple[str, str]:
    return date(year, 1, 1).isoformat(), date(year, 12, 31).isoformat()
