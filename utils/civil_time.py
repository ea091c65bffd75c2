# utils/civil_time.py - Local Civil Time Helpers
import logging
from datetime import datetime, timedelta, time

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M'
DATE_FORMAT = '%Y-%m-%d'

# Stand-in for unparsable timestamps; sorts before every real time
ZERO_TIME = datetime.min

DAY = 'day'
WEEK = 'week'
MONTH = 'month'
YEAR = 'year'


def parse_timestamp(value):
    """Parse a stored or submitted timestamp, falling back to ZERO_TIME"""
    if isinstance(value, datetime):
        return _to_civil(value)
    if not value or not isinstance(value, str):
        return ZERO_TIME
    value = value.strip()
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        pass
    try:
        # '2024-03-05T09:00', seconds and UTC offsets from HTTP clients
        return _to_civil(datetime.fromisoformat(value.replace('Z', '+00:00')))
    except ValueError:
        logger.debug(f"Unparsable timestamp {value!r}, using zero time")
        return ZERO_TIME


def _to_civil(dt):
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt.replace(second=0, microsecond=0)


def format_timestamp(dt):
    """Format as 'YYYY-MM-DD HH:MM' (four-digit year even for zero time)"""
    return f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d} {dt.hour:02d}:{dt.minute:02d}"


def parse_date(value):
    """Parse 'YYYY-MM-DD' into a date, or None"""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None


def combine_clock(date_str, hour, minute, meridiem):
    """Combine a date and a 12-hour clock reading into a timestamp

    The hour is taken leniently: anything non-numeric counts as 0, and
    12 AM is midnight while 12 PM is noon.
    """
    try:
        hour = int(hour)
    except (TypeError, ValueError):
        hour = 0
    try:
        minute = int(minute)
    except (TypeError, ValueError):
        minute = 0
    meridiem = (meridiem or '').upper()
    if meridiem == 'PM' and hour != 12:
        hour += 12
    if meridiem == 'AM' and hour == 12:
        hour = 0
    return parse_timestamp(f"{date_str} {hour:02d}:{minute:02d}")


def parse_count(value):
    """Parse a recurrence count; malformed or non-positive input counts as 1"""
    try:
        count = int(str(value).strip())
    except (TypeError, ValueError):
        logger.warning(f"Malformed recurrence count {value!r}, using 1")
        return 1
    return max(count, 1)


def add_interval(dt, count, unit):
    """Advance dt by count units of day/week/month/year

    Month and year steps clamp to the last valid day of the target month
    (Jan 31 + 1 month -> Feb 28/29).
    """
    if unit == DAY:
        return dt + timedelta(days=count)
    if unit == WEEK:
        return dt + timedelta(days=7 * count)
    if unit == MONTH:
        return dt + relativedelta(months=count)
    if unit == YEAR:
        return dt + relativedelta(years=count)
    raise ValueError(f"Unknown interval unit: {unit}")


def next_weekday(dt, weekday):
    """First datetime strictly after dt that falls on weekday (Monday=0)"""
    days_ahead = (weekday - dt.weekday()) % 7 or 7
    return dt + timedelta(days=days_ahead)


def one_year_after(dt):
    return dt + relativedelta(years=1)


def day_bounds(day):
    """First and last instant of a civil day"""
    return datetime.combine(day, time(0, 0)), datetime.combine(day, time(23, 59, 59))
