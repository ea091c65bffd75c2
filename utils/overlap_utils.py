# utils/overlap_utils.py - Which Items Fall on Which Day
import calendar
from datetime import date

from .civil_time import day_bounds


def matches(item, day_start, day_end):
    """True if the item renders on the day bounded by day_start/day_end

    The end test is inclusive so a zero-length task at midnight still
    lands on its own day.
    """
    return item.start < day_end and item.end >= day_start


def occurrences_on(items, day):
    """Items visible on a civil day, in start order"""
    day_start, day_end = day_bounds(day)
    return sorted(
        (item for item in items if matches(item, day_start, day_end)),
        key=lambda item: item.start,
    )


def month_days(items, year, month):
    """One (date, items) pair per day of the month"""
    days_in_month = calendar.monthrange(year, month)[1]
    return [
        (day, occurrences_on(items, day))
        for day in (date(year, month, d) for d in range(1, days_in_month + 1))
    ]
