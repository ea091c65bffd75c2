# utils/models.py - Occurrence and Group Records
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .civil_time import ZERO_TIME, format_timestamp, parse_timestamp

PRESET_COLORS = [
    '#E74C3C', '#E67E22', '#F1C40F', '#2ECC71',
    '#1ABC9C', '#3498DB', '#9B59B6', '#34495E',
    '#7F8C8D', '#D35400', '#27AE60', '#8E44AD',
]


class ValidationError(ValueError):
    """Rejected user input; the operation made no changes"""


class ItemKind(str, Enum):
    TASK = 'Task'
    EVENT = 'Event'

    @classmethod
    def parse(cls, value, default=None):
        if isinstance(value, cls):
            return value
        for kind in cls:
            if str(value).lower() == kind.value.lower():
                return kind
        if default is not None:
            return default
        raise ValidationError(f"Unknown item type: {value}")


class SortMode(str, Enum):
    BY_DATE = 'date'
    ALPHABETICAL = 'alpha'

    @classmethod
    def parse(cls, value, default=None):
        if isinstance(value, cls):
            return value
        value = str(value or '').lower()
        if value in ('alpha', 'alphabetical'):
            return cls.ALPHABETICAL
        if value in ('date', 'by-date', ''):
            return cls.BY_DATE
        if default is not None:
            return default
        raise ValidationError(f"Unknown sort mode: {value}")


def new_item_id():
    return str(uuid.uuid4())


def new_series_id():
    # Prefixed so a series id can never collide with an item id
    return f"s-{uuid.uuid4()}"


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() == 'true'
    return value is True


@dataclass
class Occurrence:
    id: str
    title: str
    kind: ItemKind
    group_id: str
    start: datetime
    end: datetime
    completed: bool = False
    series_id: str = ''

    @property
    def duration(self):
        return self.end - self.start

    @property
    def in_series(self):
        return bool(self.series_id)

    def copy(self, **changes):
        return replace(self, **changes)

    def to_record(self) -> Dict[str, Any]:
        record = {
            'id': self.id,
            'title': self.title,
            'start': format_timestamp(self.start),
            'end': format_timestamp(self.end),
            'type': self.kind.value,
            'groupId': self.group_id,
            'completed': self.completed,
        }
        if self.series_id:
            record['seriesId'] = self.series_id
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Occurrence':
        """Build from a stored record; bad fields degrade to safe defaults"""
        start = parse_timestamp(record.get('start'))
        end = parse_timestamp(record.get('end')) if record.get('end') else start
        return cls(
            id=str(record.get('id') or new_item_id()),
            title=str(record.get('title') or ''),
            kind=ItemKind.parse(record.get('type'), default=ItemKind.TASK),
            group_id=str(record.get('groupId') or ''),
            start=start,
            end=end,
            completed=_as_bool(record.get('completed')),
            series_id=str(record.get('seriesId') or ''),
        )


@dataclass
class Group:
    id: str
    name: str
    color: str = PRESET_COLORS[0]
    sort_mode: SortMode = SortMode.BY_DATE

    def to_record(self):
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'sortMode': self.sort_mode.value,
        }

    @classmethod
    def from_record(cls, record):
        return cls(
            id=str(record.get('id') or ''),
            name=str(record.get('name') or ''),
            color=record.get('color') or record.get('colorHex') or PRESET_COLORS[0],
            sort_mode=SortMode.parse(record.get('sortMode'), default=SortMode.BY_DATE),
        )


def new_group_id():
    return f"g-{uuid.uuid4()}"


def find_item(items, item_id) -> Optional[Occurrence]:
    for item in items:
        if item.id == item_id:
            return item
    return None


def find_group(groups, group_id) -> Optional[Group]:
    for group in groups:
        if group.id == group_id:
            return group
    return None


def sorted_groups(groups):
    """Groups in display order (by name)"""
    return sorted(groups, key=lambda g: g.name)


def is_zero(dt):
    return dt == ZERO_TIME
