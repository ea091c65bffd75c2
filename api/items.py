# api/items.py - Items API Blueprint
from flask import Blueprint, request, jsonify

from api.helpers import current_store, json_body, timestamp_from
from utils.board_utils import board_columns, item_payload
from utils.civil_time import parse_date
from utils.models import ValidationError, find_item, sorted_groups
from utils.overlap_utils import month_days, occurrences_on
from utils.recurring_utils import create_occurrences, get_recurrence_text, rule_from_request
from utils.series_utils import (
    DeleteScope, delete_occurrences, edit_occurrence,
    move_to_group, series_members, toggle_completed,
)

items_bp = Blueprint('items', __name__)


@items_bp.route('/items', methods=['GET'])
def get_items():
    """Get all items, or only those visible on ?date=YYYY-MM-DD"""
    store = current_store()
    items = store.load()
    groups = store.load_groups()

    ymd = request.args.get('date')
    if ymd:
        day = parse_date(ymd)
        if day is None:
            return jsonify({'error': f'Invalid date: {ymd}'}), 400
        items = occurrences_on(items, day)

    return jsonify([item_payload(item, groups) for item in items])


@items_bp.route('/items/month', methods=['GET'])
def get_month():
    """Month grid: every day of the month with its visible items"""
    try:
        year = int(request.args['year'])
        month = int(request.args['month'])
        if not 1 <= month <= 12:
            raise ValueError(month)
    except (KeyError, ValueError):
        return jsonify({'error': 'year and month (1-12) are required'}), 400

    store = current_store()
    groups = store.load_groups()
    days = month_days(store.load(), year, month)
    return jsonify([
        {'date': day.isoformat(), 'items': [item_payload(i, groups) for i in day_items]}
        for day, day_items in days
    ])


@items_bp.route('/items/<item_id>', methods=['GET'])
def get_item(item_id):
    store = current_store()
    item = find_item(store.load(), item_id)
    if item is None:
        return jsonify({'error': 'Item not found'}), 404
    return jsonify(item_payload(item, store.load_groups()))


@items_bp.route('/items', methods=['POST'])
def create_item():
    """Create an item, or a whole series when 'recurrence' is given"""
    data = json_body()
    store = current_store()
    groups = store.load_groups()

    group_id = data.get('groupId')
    if not group_id and groups:
        # Fall back to the first group in display order
        group_id = sorted_groups(groups)[0].id
    if group_id and not any(g.id == group_id for g in groups):
        raise ValidationError(f"Unknown group: {group_id}")

    rule = rule_from_request(data.get('recurrence'))
    start = timestamp_from(data, 'start')
    if start is None:
        raise ValidationError('A valid start time is required')
    created = create_occurrences(
        title=data.get('title'),
        kind=data.get('type'),
        group_id=group_id,
        start=start,
        end=timestamp_from(data, 'end'),
        rule=rule,
    )

    with store.editing() as items:
        items.extend(created)

    response = {'items': [item_payload(item, groups) for item in created]}
    if rule is not None:
        response['seriesId'] = created[0].series_id
        response['recurrence_text'] = get_recurrence_text(rule)
    return jsonify(response), 201


@items_bp.route('/items/<item_id>', methods=['PUT'])
def update_item(item_id):
    """Edit one item; siblings in its series are not touched"""
    data = json_body()
    store = current_store()
    groups = store.load_groups()

    with store.editing() as items:
        item = edit_occurrence(
            items, item_id, groups,
            title=data.get('title'),
            kind=data.get('type'),
            group_id=data.get('groupId'),
            start=timestamp_from(data, 'start'),
            end=timestamp_from(data, 'end'),
        )
        if item is None:
            return jsonify({'error': 'Item not found'}), 404

    return jsonify(item_payload(item, groups))


@items_bp.route('/items/<item_id>/complete', methods=['PATCH', 'POST'])
def complete_item(item_id):
    """Toggle completion, or set it with {"completed": bool}"""
    data = json_body()
    store = current_store()

    with store.editing() as items:
        item = toggle_completed(items, item_id, data.get('completed'))
        if item is None:
            return jsonify({'error': 'Item not found'}), 404

    return jsonify(item_payload(item, store.load_groups()))


@items_bp.route('/items/<item_id>/move', methods=['POST'])
def move_item(item_id):
    """Move one item to another group"""
    data = json_body()
    store = current_store()
    groups = store.load_groups()

    with store.editing() as items:
        item = move_to_group(items, item_id, data.get('groupId'), groups)
        if item is None:
            return jsonify({'error': 'Item not found'}), 404

    return jsonify(item_payload(item, groups))


@items_bp.route('/items/<item_id>', methods=['DELETE'])
def delete_item(item_id):
    """Delete an item: ?scope=this (default), future or all"""
    scope = DeleteScope.parse(request.args.get('scope'))
    store = current_store()

    with store.editing() as items:
        before = len(items)
        items[:] = delete_occurrences(items, item_id, scope)
        deleted = before - len(items)

    return jsonify({'message': 'Items deleted', 'deleted': deleted, 'scope': scope.value}), 200


@items_bp.route('/series/<series_id>', methods=['GET'])
def get_series(series_id):
    store = current_store()
    members = series_members(store.load(), series_id)
    if not members:
        return jsonify({'error': 'Series not found'}), 404
    groups = store.load_groups()
    return jsonify([item_payload(item, groups) for item in members])


@items_bp.route('/board', methods=['GET'])
def get_board():
    """Board view: one column per group"""
    store = current_store()
    return jsonify(board_columns(store.load(), store.load_groups()))
