# utils/board_utils.py - Board Columns and Display Info
from .models import ItemKind, SortMode, find_group, sorted_groups

UNASSIGNED_NAME = 'Unassigned'
UNASSIGNED_COLOR = '#646464'
COMPLETED_COLOR = '#C8C8C8'


def time_label(item):
    """'HH:MM' for tasks, 'HH:MM - HH:MM' for events"""
    label = item.start.strftime('%H:%M')
    if item.kind == ItemKind.EVENT:
        label = f"{label} - {item.end.strftime('%H:%M')}"
    return label


def display_info(item, groups):
    """Group name/color and a time label for one item

    Items whose group no longer exists render as unassigned.
    """
    group = find_group(groups, item.group_id)
    color = group.color if group else UNASSIGNED_COLOR
    if item.completed:
        color = COMPLETED_COLOR

    return {
        'group_name': group.name if group else UNASSIGNED_NAME,
        'group_color': color,
        'time_label': time_label(item),
        'card_label': f"{item.start.strftime('%a, %b %d')} | {time_label(item)}",
    }


def item_payload(item, groups):
    payload = item.to_record()
    payload.update(display_info(item, groups))
    return payload


def sort_column(items, sort_mode):
    """Incomplete items first, then by date or case-insensitive title"""
    if sort_mode == SortMode.ALPHABETICAL:
        return sorted(items, key=lambda i: (i.completed, i.title.lower()))
    return sorted(items, key=lambda i: (i.completed, i.start))


def board_columns(items, groups):
    """Board view: one column per group, plus one for dangling references"""
    columns = []
    for group in sorted_groups(groups):
        members = [item for item in items if item.group_id == group.id]
        columns.append({
            'group': group.to_record(),
            'items': [item_payload(i, groups) for i in sort_column(members, group.sort_mode)],
        })

    known = {group.id for group in groups}
    orphans = [item for item in items if item.group_id not in known]
    if orphans:
        columns.append({
            'group': {
                'id': '',
                'name': UNASSIGNED_NAME,
                'color': UNASSIGNED_COLOR,
                'sortMode': SortMode.BY_DATE.value,
            },
            'items': [item_payload(i, groups) for i in sort_column(orphans, SortMode.BY_DATE)],
        })
    return columns

