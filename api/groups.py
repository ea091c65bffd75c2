# api/groups.py - Groups API Blueprint
import logging

from flask import Blueprint, jsonify

from api.helpers import current_store, json_body
from utils.models import (
    PRESET_COLORS, Group, SortMode, ValidationError,
    find_group, new_group_id, sorted_groups,
)

logger = logging.getLogger(__name__)

groups_bp = Blueprint('groups', __name__)


def _check_name(groups, name, exclude_id=None):
    name = (name or '').strip()
    if not name:
        raise ValidationError('Name is required')
    existing_names = [g.name.lower() for g in groups if g.id != exclude_id]
    if name.lower() in existing_names:
        raise ValidationError('Group name already exists')
    return name


@groups_bp.route('/groups', methods=['GET'])
def get_groups():
    """Get all groups, sorted by name"""
    groups = current_store().load_groups()
    return jsonify([g.to_record() for g in sorted_groups(groups)])


@groups_bp.route('/groups/colors', methods=['GET'])
def get_colors():
    return jsonify(PRESET_COLORS)


@groups_bp.route('/groups', methods=['POST'])
def create_group():
    """Create a new group"""
    data = json_body()
    store = current_store()

    with store.editing_groups() as groups:
        group = Group(
            id=new_group_id(),
            name=_check_name(groups, data.get('name')),
            color=data.get('color') or PRESET_COLORS[0],
            sort_mode=SortMode.parse(data.get('sortMode')),
        )
        groups.append(group)

    return jsonify(group.to_record()), 201


@groups_bp.route('/groups/<group_id>', methods=['PUT'])
def update_group(group_id):
    """Update a group (name, color, sort mode)"""
    data = json_body()
    store = current_store()

    with store.editing_groups() as groups:
        group = find_group(groups, group_id)
        if group is None:
            return jsonify({'error': 'Group not found'}), 404
        if 'name' in data:
            group.name = _check_name(groups, data['name'], exclude_id=group_id)
        if 'color' in data:
            group.color = data['color'] or group.color
        if 'sortMode' in data:
            group.sort_mode = SortMode.parse(data['sortMode'])

    return jsonify(group.to_record())


@groups_bp.route('/groups/<group_id>', methods=['DELETE'])
def delete_group(group_id):
    """Delete a group; its items keep the now-dangling reference"""
    store = current_store()

    with store.editing_groups() as groups:
        group = find_group(groups, group_id)
        if group is None:
            return jsonify({'error': 'Group not found'}), 404
        groups.remove(group)

    orphaned = sum(1 for item in store.load() if item.group_id == group_id)
    logger.info(f"Deleted group {group_id}; {orphaned} item(s) are now unassigned")
    return jsonify({'message': 'Group deleted successfully', 'unassigned_items': orphaned}), 200
