# utils/series_utils.py - Scoped Delete and Edit of Items
import logging
from enum import Enum

from .civil_time import parse_timestamp
from .models import ItemKind, ValidationError, find_group, find_item, is_zero

logger = logging.getLogger(__name__)


class DeleteScope(str, Enum):
    THIS_ONLY = 'this'
    THIS_AND_FUTURE = 'future'
    ALL = 'all'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        aliases = {
            'this': cls.THIS_ONLY, 'this_only': cls.THIS_ONLY, 'one': cls.THIS_ONLY,
            'future': cls.THIS_AND_FUTURE, 'this_and_future': cls.THIS_AND_FUTURE,
            'all': cls.ALL, 'series': cls.ALL,
        }
        key = str(value or 'this').strip().lower().replace(' ', '_').replace('+', 'and')
        try:
            return aliases[key]
        except KeyError:
            raise ValidationError(f"Unknown delete scope: {value}") from None


def delete_occurrences(items, target_id, scope=DeleteScope.THIS_ONLY):
    """Return the items left after deleting target_id with the given scope

    Items outside the target's series are never touched. An unknown
    target id leaves the list as it was.
    """
    scope = DeleteScope.parse(scope)
    target = find_item(items, target_id)
    if target is None:
        return list(items)

    if scope == DeleteScope.THIS_ONLY or not target.in_series:
        kept = [item for item in items if item.id != target_id]
    elif scope == DeleteScope.ALL:
        kept = [item for item in items if item.series_id != target.series_id]
    else:
        kept = [
            item for item in items
            if item.series_id != target.series_id or item.start < target.start
        ]

    logger.info(f"Deleted {len(items) - len(kept)} item(s) for {target_id} (scope={scope.value})")
    return kept


def series_members(items, series_id):
    """Items in a series, in start order"""
    if not series_id:
        return []
    return sorted((item for item in items if item.series_id == series_id), key=lambda i: i.start)


def edit_occurrence(items, target_id, groups, title=None, kind=None, group_id=None,
                    start=None, end=None):
    """Edit one item in place; siblings and the series id are left alone

    Returns the edited item, or None if target_id is unknown.
    """
    target = find_item(items, target_id)
    if target is None:
        return None

    new_title = target.title if title is None else title.strip()
    if not new_title:
        raise ValidationError('Title is required')
    if group_id is not None and find_group(groups, group_id) is None:
        raise ValidationError(f"Unknown group: {group_id}")

    new_kind = target.kind if kind is None else ItemKind.parse(kind)
    new_start = target.start if start is None else parse_timestamp(start)
    new_end = target.end if end is None else parse_timestamp(end)
    if is_zero(new_start):
        raise ValidationError('A valid start time is required')
    if new_kind == ItemKind.TASK:
        new_end = new_start
    elif is_zero(new_end) or new_end < new_start:
        raise ValidationError('End must not be before start')

    target.title = new_title
    target.kind = new_kind
    target.start = new_start
    target.end = new_end
    if group_id is not None:
        target.group_id = group_id
    return target


def toggle_completed(items, target_id, completed=None):
    """Flip (or set) the completion flag of one item"""
    target = find_item(items, target_id)
    if target is None:
        return None
    target.completed = (not target.completed) if completed is None else bool(completed)
    return target


def move_to_group(items, target_id, group_id, groups):
    """Reassign one item to another group"""
    if find_group(groups, group_id) is None:
        raise ValidationError(f"Unknown group: {group_id}")
    target = find_item(items, target_id)
    if target is None:
        return None
    target.group_id = group_id
    return target
