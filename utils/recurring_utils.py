# utils/recurring_utils.py - Recurring Items Logic
import calendar
import logging
from dataclasses import dataclass
from enum import Enum

from .civil_time import (
    DAY, WEEK, MONTH, YEAR,
    add_interval, next_weekday, one_year_after, parse_count,
)
from .models import (
    ItemKind, Occurrence, ValidationError,
    is_zero, new_item_id, new_series_id,
)

logger = logging.getLogger(__name__)

# Hard cap on generated siblings per expansion (the base is not counted)
MAX_GENERATED = 100

UNIT_ALIASES = {
    'day': DAY, 'days': DAY, 'day(s)': DAY, 'daily': DAY,
    'week': WEEK, 'weeks': WEEK, 'week(s)': WEEK, 'weekly': WEEK,
    'month': MONTH, 'months': MONTH, 'month(s)': MONTH, 'monthly': MONTH,
    'year': YEAR, 'years': YEAR, 'year(s)': YEAR, 'yearly': YEAR,
}

WEEKDAY_NAMES = [name.lower() for name in calendar.day_name]


class Ordinal(str, Enum):
    EVERY = 'every'
    EVERY_OTHER = 'every_other'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        normalized = str(value or 'every').strip().lower().replace(' ', '_').replace('-', '_')
        for ordinal in cls:
            if normalized == ordinal.value:
                return ordinal
        raise ValidationError(f"Unknown recurrence ordinal: {value}")


@dataclass(frozen=True)
class IntervalRule:
    """Repeat every `count` days/weeks/months/years"""
    count: int
    unit: str

    def __post_init__(self):
        if self.unit not in (DAY, WEEK, MONTH, YEAR):
            raise ValidationError(f"Unknown recurrence unit: {self.unit}")
        object.__setattr__(self, 'count', parse_count(self.count))

    def advance(self, current):
        return add_interval(current, self.count, self.unit)


@dataclass(frozen=True)
class WeekdayRule:
    """Repeat on a weekday (Monday=0), every week or every other week"""
    ordinal: Ordinal
    weekday: int

    def __post_init__(self):
        object.__setattr__(self, 'ordinal', Ordinal.parse(self.ordinal))
        if (isinstance(self.weekday, bool) or not isinstance(self.weekday, int)
                or not 0 <= self.weekday <= 6):
            raise ValidationError(f"Weekday must be 0-6, got {self.weekday!r}")

    def advance(self, current):
        current = next_weekday(current, self.weekday)
        if self.ordinal == Ordinal.EVERY_OTHER:
            current = add_interval(current, 1, WEEK)
        return current


def parse_weekday(value):
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    name = str(value or '').strip().lower()
    for index, day_name in enumerate(WEEKDAY_NAMES):
        if name in (day_name, day_name[:3]):
            return index
    raise ValidationError(f"Unknown weekday: {value}")


def rule_from_request(data):
    """Build a recurrence rule from loosely-typed form data, or None"""
    if not data:
        return None
    if not isinstance(data, dict):
        raise ValidationError(f"Recurrence must be an object, got {data!r}")
    mode = str(data.get('mode', 'interval')).strip().lower()
    if mode == 'interval':
        unit = UNIT_ALIASES.get(str(data.get('unit', 'day')).strip().lower())
        if unit is None:
            raise ValidationError(f"Unknown recurrence unit: {data.get('unit')}")
        return IntervalRule(count=data.get('count', 1), unit=unit)
    if mode in ('weekday', 'specific_weekday', 'specific day'):
        return WeekdayRule(
            ordinal=Ordinal.parse(data.get('ordinal')),
            weekday=parse_weekday(data.get('weekday')),
        )
    raise ValidationError(f"Unknown recurrence mode: {mode}")


def expand(base, rule):
    """Generate the siblings that follow `base` under `rule`

    The base itself is not returned. Generation stops at the first date
    past one year from the base start, or after MAX_GENERATED siblings.
    """
    limit = one_year_after(base.start)
    duration = base.duration
    current = base.start
    siblings = []

    while len(siblings) < MAX_GENERATED:
        try:
            current = rule.advance(current)
        except (OverflowError, ValueError):
            # Step leaves the representable range, so it is past the window too
            break
        if current > limit:
            break
        siblings.append(base.copy(
            id=new_item_id(),
            start=current,
            end=current + duration,
            completed=False,
        ))

    return siblings


def create_occurrences(title, kind, group_id, start, end=None, rule=None):
    """Create a base item plus, when a rule is given, its whole series"""
    title = (title or '').strip()
    if not title:
        raise ValidationError('Title is required')
    if not group_id:
        raise ValidationError('Please select a group')

    if is_zero(start):
        raise ValidationError('A valid start time is required')

    kind = ItemKind.parse(kind, default=ItemKind.TASK)
    if kind == ItemKind.TASK or end is None:
        end = start
    if end < start:
        raise ValidationError('End must not be before start')

    base = Occurrence(
        id=new_item_id(),
        title=title,
        kind=kind,
        group_id=group_id,
        start=start,
        end=end,
        series_id=new_series_id() if rule is not None else '',
    )
    if rule is None:
        return [base]

    created = [base] + expand(base, rule)
    logger.info(f"Created series {base.series_id} with {len(created)} items")
    return created


def get_recurrence_text(rule):
    """Generate human-readable recurrence description"""
    if isinstance(rule, WeekdayRule):
        day = calendar.day_name[rule.weekday]
        if rule.ordinal == Ordinal.EVERY_OTHER:
            return f"Every other {day}"
        return f"Every {day}"

    heads = {DAY: 'Daily', WEEK: 'Weekly', MONTH: 'Monthly', YEAR: 'Yearly'}
    if rule.count == 1:
        return heads[rule.unit]
    return f"Every {rule.count} {rule.unit}(s)"
