"""Calendar-month arithmetic for trailing analysis windows"""

import calendar
from datetime import date


def subtract_months(from_date: date, months: int) -> date:
    """Step back whole calendar months, clamping the day to the target month's length"""
    total = from_date.year * 12 + (from_date.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_between(start: date, end: date) -> int:
    """
    Count whole calendar months elapsed from start to end.

    A partial month does not count: Jan 15 -> Mar 14 is 1 month, Jan 15 -> Mar 15 is 2.
    Returns 0 when end precedes start.
    """
    if end < start:
        return 0
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


def month_start(day: date) -> date:
    """First day of the month containing day"""
    return day.replace(day=1)
