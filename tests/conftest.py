from datetime import datetime

import pytest

from app import create_app
from utils.models import Group, ItemKind, Occurrence


@pytest.fixture
def app(tmp_path):
    app = create_app({'TESTING': True, 'DATA_DIR': str(tmp_path / 'data')})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def groups():
    return [
        Group(id='g-1', name='Work', color='#3498DB'),
        Group(id='g-2', name='Personal', color='#2ECC71'),
    ]


def make_item(item_id, start, end=None, series_id='', title=None, group_id='g-1'):
    start = datetime.strptime(start, '%Y-%m-%d %H:%M')
    end = datetime.strptime(end, '%Y-%m-%d %H:%M') if end else start
    return Occurrence(
        id=item_id,
        title=title or f'Item {item_id}',
        kind=ItemKind.EVENT if end != start else ItemKind.TASK,
        group_id=group_id,
        start=start,
        end=end,
        series_id=series_id,
    )
