# utils/ics_utils.py - iCalendar Import/Export
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone

from icalendar import Calendar, Event

from .civil_time import ZERO_TIME
from .models import (
    ItemKind, Occurrence, ValidationError,
    find_group, is_zero, new_item_id, sorted_groups,
)

logger = logging.getLogger(__name__)

PRODID = '-//calboard//Local Calendar & Kanban//EN'
EXPORT_FILENAME = 'my_calendar.ics'

_PREFIX_RE = re.compile(r'^\[(?P<name>[^\]]*)\]\s?(?P<title>.*)$', re.S)


@dataclass
class InterchangeRecord:
    """Format-neutral {identity, title, start, end} record"""
    identity: str
    title: str
    start: datetime
    end: datetime


def to_interchange(items, groups):
    """Map items to records, embedding the group name as a '[Group] ' prefix"""
    records = []
    for item in items:
        group = find_group(groups, item.group_id)
        name = group.name if group else ''
        records.append(InterchangeRecord(
            identity=item.id,
            title=f"[{name}] {item.title}",
            start=item.start,
            end=item.end,
        ))
    return records


def from_interchange(records, groups, default_group_id=None):
    """Map records to new items

    A '[Group] ' prefix naming a known group (or an empty '[] ') is
    stripped and decides the group; anything else lands in the default
    group. Equal or missing end times make a Task, otherwise an Event.
    """
    if default_group_id is None:
        ordered = sorted_groups(groups)
        default_group_id = ordered[0].id if ordered else ''
    by_name = {group.name: group.id for group in groups}

    items = []
    for record in records:
        title, group_id = record.title, default_group_id
        match = _PREFIX_RE.match(record.title or '')
        if match and (match.group('name') in by_name or match.group('name') == ''):
            title = match.group('title')
            group_id = by_name.get(match.group('name'), default_group_id)

        end = record.end if record.end is not None else record.start
        kind = ItemKind.TASK
        if end != record.start and not is_zero(end):
            kind = ItemKind.EVENT
        if is_zero(end):
            end = record.start

        items.append(Occurrence(
            id=new_item_id(),
            title=title,
            kind=kind,
            group_id=group_id,
            start=record.start,
            end=end,
        ))
    return items


def export_ics(items, groups):
    """Serialize items to an iCalendar document (bytes)"""
    cal = Calendar()
    cal.add('prodid', PRODID)
    cal.add('version', '2.0')
    cal.add('method', 'PUBLISH')
    stamp = datetime.now(timezone.utc)

    for record in to_interchange(items, groups):
        event = Event()
        event.add('uid', record.identity)
        event.add('dtstamp', stamp)
        # Naive datetimes serialize as floating local time
        event.add('dtstart', record.start)
        event.add('dtend', record.end)
        event.add('summary', record.title)
        cal.add_component(event)

    return cal.to_ical()


def _civil(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone().replace(tzinfo=None)
        return value.replace(second=0, microsecond=0)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return ZERO_TIME


def read_ics(content):
    """Parse an iCalendar document into interchange records"""
    try:
        cal = Calendar.from_ical(content)
    except ValueError as e:
        raise ValidationError(f"Failed to parse calendar: {e}") from e

    records = []
    for component in cal.walk('VEVENT'):
        summary = component.get('summary')
        if summary is None or 'DTSTART' not in component:
            logger.debug('Skipping VEVENT without summary or start')
            continue
        start = _civil(component.decoded('DTSTART'))
        end = _civil(component.decoded('DTEND')) if 'DTEND' in component else None
        records.append(InterchangeRecord(
            identity=str(component.get('uid', '')),
            title=str(summary),
            start=start,
            end=end,
        ))
    return records


def import_ics(content, groups, default_group_id=None):
    """Parse an iCalendar document into new items"""
    items = from_interchange(read_ics(content), groups, default_group_id)
    logger.info(f"Imported {len(items)} item(s) from iCalendar data")
    return items
