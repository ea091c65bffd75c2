# utils/data_manager.py - Data Storage Management
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager

from .models import Group, Occurrence, SortMode

logger = logging.getLogger(__name__)

DATA_DIR = os.environ.get('CALBOARD_DATA_DIR', 'data')
CALENDARS_FILE = 'calendars_meta.json'
DEFAULT_CALENDAR = 'Default'

# One lock for every read-modify-write against any calendar's files
STORE_LOCK = threading.RLock()

# Seeded when a calendar has no groups file yet
DEFAULT_GROUPS = [
    {'id': 'g-1', 'name': 'Work', 'color': '#3498DB', 'sortMode': SortMode.BY_DATE.value},
    {'id': 'g-2', 'name': 'Personal', 'color': '#2ECC71', 'sortMode': SortMode.BY_DATE.value},
]


class StoreError(OSError):
    """A calendar file could not be written"""


def ensure_data_directory(data_dir=None):
    """Ensure the data directory exists"""
    os.makedirs(data_dir or DATA_DIR, exist_ok=True)


def load_json_file(filepath, default_data=None):
    """Generic function to load JSON files"""
    try:
        if os.path.exists(filepath):
            with open(filepath, 'r', encoding='utf-8') as f:
                return json.load(f)
        return default_data
    except (OSError, ValueError) as e:
        logger.error(f"Error loading {filepath}: {e}")
        return default_data


def save_json_file(filepath, data):
    """Write JSON atomically: temp file in the same directory, then rename"""
    directory = os.path.dirname(filepath) or '.'
    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=1, ensure_ascii=False)
        os.replace(tmp_path, filepath)
        return True
    except (OSError, TypeError) as e:
        logger.error(f"Error saving {filepath}: {e}")
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        return False


def calendar_file_prefix(calendar_name):
    return calendar_name.replace(' ', '_')


# Calendar list
def load_calendar_list(data_dir=None):
    """Load calendar names, seeding the list with the default calendar"""
    path = os.path.join(data_dir or DATA_DIR, CALENDARS_FILE)
    with STORE_LOCK:
        names = load_json_file(path, default_data=[])
        if not isinstance(names, list):
            names = []
        names = [str(name) for name in names if name]
        if not names:
            names = [DEFAULT_CALENDAR]
            save_json_file(path, names)
        return names


def save_calendar_list(names, data_dir=None):
    return save_json_file(os.path.join(data_dir or DATA_DIR, CALENDARS_FILE), names)


class ItemStore:
    """Items and groups of one named calendar, backed by two JSON files

    All writers go through editing()/editing_groups(), which hold the
    module lock for the whole load-mutate-save cycle.
    """

    def __init__(self, calendar_name=DEFAULT_CALENDAR, data_dir=None):
        self.calendar_name = calendar_name or DEFAULT_CALENDAR
        self.data_dir = data_dir or DATA_DIR
        prefix = calendar_file_prefix(self.calendar_name)
        self.items_file = os.path.join(self.data_dir, f'{prefix}_data.json')
        self.groups_file = os.path.join(self.data_dir, f'{prefix}_groups.json')

    # Groups
    def load_groups(self):
        with STORE_LOCK:
            if not os.path.exists(self.groups_file):
                self.save_groups([Group.from_record(g) for g in DEFAULT_GROUPS])
            records = load_json_file(self.groups_file, default_data=[])
            if not isinstance(records, list):
                records = []
            return [Group.from_record(r) for r in records if isinstance(r, dict)]

    def save_groups(self, groups):
        return save_json_file(self.groups_file, [g.to_record() for g in groups])

    # Items
    def load(self):
        """Load every item; corrupt fields fall back to defaults"""
        with STORE_LOCK:
            records = load_json_file(self.items_file, default_data=[])
            if not isinstance(records, list):
                logger.error(f"{self.items_file} does not hold a list, ignoring it")
                return []

            groups_by_name = None
            items = []
            for record in records:
                if not isinstance(record, dict):
                    logger.warning(f"Skipping non-object record in {self.items_file}: {record!r}")
                    continue
                item = Occurrence.from_record(record)
                if not item.group_id and record.get('group'):
                    # Older files stored the group name instead of its id
                    if groups_by_name is None:
                        groups_by_name = {g.name: g.id for g in self.load_groups()}
                    item.group_id = groups_by_name.get(record['group'], '')
                items.append(item)
            return items

    def save(self, items):
        return save_json_file(self.items_file, [item.to_record() for item in items])

    @contextmanager
    def editing(self):
        """Yield the item list for in-place mutation and save it afterwards

        Raising inside the block skips the save, leaving the files as they
        were.
        """
        with STORE_LOCK:
            items = self.load()
            yield items
            if not self.save(items):
                raise StoreError(f"Failed to save {self.items_file}")

    @contextmanager
    def editing_groups(self):
        with STORE_LOCK:
            groups = self.load_groups()
            yield groups
            if not self.save_groups(groups):
                raise StoreError(f"Failed to save {self.groups_file}")
