# api/calendars.py - Calendars API Blueprint
import logging

from flask import Blueprint, jsonify

from api.helpers import data_dir, json_body
from utils.data_manager import STORE_LOCK, load_calendar_list, save_calendar_list
from utils.models import ValidationError

logger = logging.getLogger(__name__)

calendars_bp = Blueprint('calendars', __name__)


@calendars_bp.route('/calendars', methods=['GET'])
def get_calendars():
    """List calendar names"""
    return jsonify(load_calendar_list(data_dir()))


@calendars_bp.route('/calendars', methods=['POST'])
def create_calendar():
    """Create a new, empty calendar"""
    name = (json_body().get('name') or '').strip()
    if not name:
        raise ValidationError('Name is required')
    if '/' in name or '\\' in name:
        raise ValidationError('Calendar names cannot contain path separators')

    with STORE_LOCK:
        names = load_calendar_list(data_dir())
        if name in names:
            raise ValidationError('Calendar already exists')
        names.append(name)
        if not save_calendar_list(names, data_dir()):
            return jsonify({'error': 'Failed to save calendar list'}), 500

    return jsonify(names), 201


@calendars_bp.route('/calendars/<name>', methods=['DELETE'])
def delete_calendar(name):
    """Remove a calendar from the list; its data files are left on disk"""
    with STORE_LOCK:
        names = load_calendar_list(data_dir())
        if name not in names:
            return jsonify({'error': 'Calendar not found'}), 404
        if len(names) <= 1:
            raise ValidationError('Cannot delete the last calendar')
        names.remove(name)
        if not save_calendar_list(names, data_dir()):
            return jsonify({'error': 'Failed to save calendar list'}), 500

    logger.info(f"Removed calendar {name!r}")
    return jsonify(names), 200
