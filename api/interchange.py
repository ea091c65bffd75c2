# api/interchange.py - iCalendar Import/Export Blueprint
from flask import Blueprint, Response, jsonify, request

from api.helpers import current_store
from utils.ics_utils import EXPORT_FILENAME, export_ics, import_ics
from utils.models import ValidationError

interchange_bp = Blueprint('interchange', __name__)


@interchange_bp.route('/export.ics', methods=['GET'])
def export_calendar():
    store = current_store()
    body = export_ics(store.load(), store.load_groups())
    return Response(
        body,
        mimetype='text/calendar',
        headers={'Content-Disposition': f'attachment; filename={EXPORT_FILENAME}'},
    )


@interchange_bp.route('/import', methods=['POST'])
def import_calendar():
    """Import events from an uploaded .ics file or a raw text/calendar body"""
    upload = request.files.get('file')
    content = upload.read() if upload else request.get_data()
    if not content:
        raise ValidationError('No calendar data provided')

    store = current_store()
    imported = import_ics(content, store.load_groups(), request.args.get('groupId') or None)
    with store.editing() as items:
        items.extend(imported)

    return jsonify({'message': f'{len(imported)} items', 'imported': len(imported)}), 201
