# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Calendar-aware date range calculations for the time period views.

All functions are pure. Inputs may be ``date`` or ``datetime``; the time of
day is always ignored.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Union

DateLike = Union[date, datetime]

MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


@dataclass
class WeekInfo:
    """A Monday-Sunday week of a calendar month"""
    week_number: int
    start_date: date
    end_date: date
    label: str
    dates: List[date] = field(default_factory=list)  # only days of the target month


@dataclass
class MonthInfo:
    """A whole calendar month"""
    month: int  # 1-12
    year: int
    start_date: date
    end_date: date
    label: str


def to_date(value: DateLike) -> date:
    """Drop the time component of a datetime"""
    if isinstance(value, datetime):
        return value.date()
    return value


def today() -> date:
    """Today's date (local time)"""
    return date.today()


def work_week(reference_date: Optional[DateLike] = None) -> List[date]:
    """
    Monday to Friday of the work week containing the reference date.

    Weekends map back to the week that just ended: Saturday goes back 5 days
    and Sunday 6 days to reach Monday.
    """
    ref = to_date(reference_date) if reference_date is not None else today()
    monday = ref - timedelta(days=ref.weekday())
    return [monday + timedelta(days=offset) for offset in range(5)]


def month_as_weeks(reference_date: Optional[DateLike] = None) -> List[WeekInfo]:
    """
    Partition the month containing the reference date into Monday-Sunday weeks.

    The first week starts on the Monday on or before the 1st and the last ends
    on the Sunday on or after the last day. ``dates`` of each week only holds
    days of the month itself, so every month day belongs to exactly one week.
    """
    ref = to_date(reference_date) if reference_date is not None else today()
    first_day = ref.replace(day=1)
    last_day = ref.replace(day=calendar.monthrange(ref.year, ref.month)[1])

    weeks: List[WeekInfo] = []
    week_start = first_day - timedelta(days=first_day.weekday())
    week_number = 1
    while week_start <= last_day:
        week_end = week_start + timedelta(days=6)
        member_days = [
            week_start + timedelta(days=offset)
            for offset in range(7)
            if first_day <= week_start + timedelta(days=offset) <= last_day
        ]
        weeks.append(WeekInfo(
            week_number=week_number,
            start_date=week_start,
            end_date=week_end,
            label=f"Week {week_number}",
            dates=member_days,
        ))
        week_number += 1
        week_start = week_end + timedelta(days=1)

    return weeks


def multi_month(month_count: int, reference_date: Optional[DateLike] = None) -> List[MonthInfo]:
    """
    ``month_count`` whole calendar months ending with the reference month, oldest first.

    Raises:
        ValueError: If month_count is less than 1.
    """
    if month_count < 1:
        raise ValueError(f"month_count must be at least 1, got {month_count}")

    ref = to_date(reference_date) if reference_date is not None else today()
    months: List[MonthInfo] = []
    for back in range(month_count - 1, -1, -1):
        # Months since year 0 makes the year rollover a plain divmod
        index = ref.year * 12 + (ref.month - 1) - back
        year, month_zero = divmod(index, 12)
        month = month_zero + 1
        start = date(year, month, 1)
        end = date(year, month, calendar.monthrange(year, month)[1])
        months.append(MonthInfo(
            month=month,
            year=year,
            start_date=start,
            end_date=end,
            label=format_month_label(start),
        ))
    return months


def in_range(value: DateLike, start: DateLike, end: DateLike) -> bool:
    """Inclusive range test with start floored to midnight and end ceiled to end of day"""
    if isinstance(value, datetime):
        moment = value
    else:
        moment = datetime.combine(value, time.min)
    lower = datetime.combine(to_date(start), time.min)
    upper = datetime.combine(to_date(end), time.max)
    if moment.tzinfo is not None:
        moment = moment.replace(tzinfo=None)
    return lower <= moment <= upper


def format_date_string(value: DateLike) -> str:
    """YYYY-MM-DD"""
    return to_date(value).isoformat()


def format_day_label(value: DateLike) -> str:
    """MM/DD"""
    return to_date(value).strftime("%m/%d")


def format_month_label(value: DateLike) -> str:
    """Short month name, e.g. Jan"""
    return MONTH_NAMES[to_date(value).month - 1]


def parse_date(value: Union[str, DateLike]) -> date:
    """Parse YYYY-MM-DD (an ISO timestamp is cut at the 'T')"""
    if isinstance(value, (date, datetime)):
        return to_date(value)
    return date.fromisoformat(value.split("T", 1)[0].strip())
