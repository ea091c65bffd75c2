# api/helpers.py - Shared Request Helpers
from flask import current_app, request

from utils.civil_time import combine_clock, parse_timestamp
from utils.data_manager import DEFAULT_CALENDAR, ItemStore, load_calendar_list
from utils.models import ValidationError


def data_dir():
    return current_app.config['DATA_DIR']


def current_store():
    """Store for the calendar named by ?calendar= (default calendar otherwise)"""
    name = request.args.get('calendar') or DEFAULT_CALENDAR
    if name not in load_calendar_list(data_dir()):
        raise ValidationError(f"Unknown calendar: {name}")
    return ItemStore(name, data_dir())


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def timestamp_from(data, prefix):
    """Read '<prefix>' as a timestamp, or '<prefix>_date' plus a 12-hour clock

    Returns None when the field is absent.
    """
    if data.get(prefix):
        return parse_timestamp(data[prefix])
    if data.get(f'{prefix}_date'):
        return combine_clock(
            data[f'{prefix}_date'],
            data.get(f'{prefix}_hour', '09'),
            data.get(f'{prefix}_minute', '00'),
            data.get(f'{prefix}_meridiem', 'AM'),
        )
    return None
