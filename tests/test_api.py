import pytest


def _create(client, **data):
    payload = {'title': 'Standup', 'type': 'Task', 'groupId': 'g-1', 'start': '2024-01-01 10:00'}
    payload.update(data)
    return client.post('/api/items', json=payload)


def test_health(client):
    assert client.get('/health').get_json() == {'status': 'ok'}


def test_create_single_item(client):
    response = _create(client)
    assert response.status_code == 201
    items = response.get_json()['items']
    assert len(items) == 1
    assert items[0]['start'] == items[0]['end'] == '2024-01-01 10:00'
    assert items[0]['group_name'] == 'Work'
    assert 'seriesId' not in items[0]


def test_create_with_clock_fields(client):
    response = client.post('/api/items', json={
        'title': 'Lunch', 'type': 'Event', 'groupId': 'g-2',
        'start_date': '2024-01-01', 'start_hour': '12', 'start_minute': '00', 'start_meridiem': 'PM',
        'end_date': '2024-01-01', 'end_hour': '01', 'end_minute': '30', 'end_meridiem': 'PM',
    })
    item = response.get_json()['items'][0]
    assert (item['start'], item['end']) == ('2024-01-01 12:00', '2024-01-01 13:30')


def test_create_defaults_to_first_group_by_name(client):
    response = _create(client, groupId=None)
    assert response.get_json()['items'][0]['groupId'] == 'g-2'


def test_create_series(client):
    response = _create(client, type='Event', end='2024-01-01 11:00',
                       recurrence={'mode': 'interval', 'count': '1', 'unit': 'Month(s)'})
    body = response.get_json()
    assert response.status_code == 201
    assert body['recurrence_text'] == 'Monthly'
    assert [i['start'] for i in body['items'][:4]] == [
        '2024-01-01 10:00', '2024-02-01 10:00', '2024-03-01 10:00', '2024-04-01 10:00',
    ]
    assert {i['seriesId'] for i in body['items']} == {body['seriesId']}

    series = client.get(f"/api/series/{body['seriesId']}").get_json()
    assert len(series) == len(body['items']) == 13


@pytest.mark.parametrize('data', [
    {'title': ''},
    {'groupId': 'g-unknown'},
    {'start': 'soon'},
    {'recurrence': {'mode': 'interval', 'unit': 'fortnight'}},
    {'recurrence': 'weekly'},
    {'recurrence': True},
])
def test_create_validation_errors_change_nothing(client, data):
    response = _create(client, **data)
    assert response.status_code == 400
    assert 'error' in response.get_json()
    assert client.get('/api/items').get_json() == []


def test_items_for_day(client):
    _create(client, title='Task', start='2024-03-05 09:00')
    _create(client, title='Night', type='Event', start='2024-03-05 22:00', end='2024-03-06 01:00')
    titles = lambda day: [i['title'] for i in client.get(f'/api/items?date={day}').get_json()]
    assert titles('2024-03-05') == ['Task', 'Night']
    assert titles('2024-03-06') == ['Night']
    assert titles('2024-03-07') == []
    assert client.get('/api/items?date=March').status_code == 400


def test_month_view(client):
    _create(client, start='2024-02-29 09:00')
    days = client.get('/api/items/month?year=2024&month=2').get_json()
    assert len(days) == 29
    assert days[-1]['date'] == '2024-02-29' and len(days[-1]['items']) == 1
    assert client.get('/api/items/month?year=2024&month=13').status_code == 400


def test_delete_scopes(client):
    body = _create(client, recurrence={'mode': 'interval', 'count': 1, 'unit': 'day'},
                   start='2024-12-27 10:00').get_json()
    ids = [i['id'] for i in body['items']]
    solo = _create(client, title='Solo').get_json()['items'][0]['id']

    response = client.delete(f'/api/items/{ids[2]}?scope=future')
    assert response.get_json()['deleted'] == len(ids) - 2
    remaining = {i['id'] for i in client.get('/api/items').get_json()}
    assert remaining == {ids[0], ids[1], solo}

    response = client.delete(f'/api/items/{ids[0]}?scope=all')
    assert response.get_json()['deleted'] == 2
    assert [i['id'] for i in client.get('/api/items').get_json()] == [solo]


def test_delete_unknown_is_no_op(client):
    _create(client)
    response = client.delete('/api/items/nope?scope=all')
    assert response.status_code == 200
    assert response.get_json()['deleted'] == 0
    assert len(client.get('/api/items').get_json()) == 1


def test_delete_rejects_unknown_scope(client):
    item_id = _create(client).get_json()['items'][0]['id']
    assert client.delete(f'/api/items/{item_id}?scope=most').status_code == 400


def test_edit_is_this_only(client):
    body = _create(client, recurrence={'mode': 'weekday', 'ordinal': 'every', 'weekday': 'Friday'}).get_json()
    first, second = body['items'][0]['id'], body['items'][1]['id']

    response = client.put(f'/api/items/{second}', json={'title': 'Demo day', 'groupId': 'g-2'})
    assert response.status_code == 200
    edited = response.get_json()
    assert edited['title'] == 'Demo day' and edited['seriesId'] == body['seriesId']
    assert client.get(f'/api/items/{first}').get_json()['title'] == 'Standup'

    assert client.put('/api/items/nope', json={'title': 'x'}).status_code == 404
    assert client.put(f'/api/items/{first}', json={'title': ''}).status_code == 400


def test_complete_and_move(client):
    item_id = _create(client).get_json()['items'][0]['id']
    assert client.patch(f'/api/items/{item_id}/complete').get_json()['completed'] is True
    assert client.patch(f'/api/items/{item_id}/complete', json={'completed': False}).get_json()['completed'] is False

    moved = client.post(f'/api/items/{item_id}/move', json={'groupId': 'g-2'}).get_json()
    assert moved['group_name'] == 'Personal'
    assert client.post(f'/api/items/{item_id}/move', json={'groupId': 'zzz'}).status_code == 400
    assert client.patch('/api/items/nope/complete').status_code == 404


def test_group_crud_and_dangling_items(client):
    created = client.post('/api/groups', json={'name': 'Chores', 'color': '#E67E22'})
    assert created.status_code == 201
    group_id = created.get_json()['id']
    assert client.post('/api/groups', json={'name': 'chores'}).status_code == 400
    assert client.post('/api/groups', json={'name': ''}).status_code == 400

    names = [g['name'] for g in client.get('/api/groups').get_json()]
    assert names == ['Chores', 'Personal', 'Work']

    updated = client.put(f'/api/groups/{group_id}', json={'sortMode': 'alpha'}).get_json()
    assert updated['sortMode'] == 'alpha'

    _create(client, groupId=group_id)
    response = client.delete(f'/api/groups/{group_id}')
    assert response.get_json()['unassigned_items'] == 1

    items = client.get('/api/items').get_json()
    assert items[0]['groupId'] == group_id
    assert items[0]['group_name'] == 'Unassigned'
    board = client.get('/api/board').get_json()
    assert board[-1]['group']['name'] == 'Unassigned'
    assert client.delete(f'/api/groups/{group_id}').status_code == 404


def test_calendars_are_isolated(client):
    assert client.get('/api/calendars').get_json() == ['Default']
    assert client.post('/api/calendars', json={'name': 'Side Project'}).status_code == 201
    assert client.post('/api/calendars', json={'name': 'Side Project'}).status_code == 400
    assert client.post('/api/calendars', json={'name': '../etc'}).status_code == 400

    side = {'calendar': 'Side Project'}
    client.post('/api/items', query_string=side,
                json={'title': 'Ship', 'groupId': 'g-1', 'start': '2024-01-01 10:00'})
    assert len(client.get('/api/items', query_string=side).get_json()) == 1
    assert client.get('/api/items').get_json() == []
    assert client.get('/api/items?calendar=Nope').status_code == 400

    assert client.delete('/api/calendars/Side%20Project').get_json() == ['Default']
    assert client.delete('/api/calendars/Default').status_code == 400


def test_export_and_import(client):
    _create(client, title='Report', start='2024-03-05 09:00')
    _create(client, title='Trip', type='Event', groupId='g-2',
            start='2024-03-05 22:00', end='2024-03-06 01:00')

    exported = client.get('/api/export.ics')
    assert exported.mimetype == 'text/calendar'
    assert 'my_calendar.ics' in exported.headers['Content-Disposition']

    client.post('/api/calendars', json={'name': 'Copy'})
    response = client.post('/api/import?calendar=Copy', data=exported.data,
                           content_type='text/calendar')
    assert response.status_code == 201
    assert response.get_json()['imported'] == 2

    copied = client.get('/api/items?calendar=Copy').get_json()
    assert [(i['title'], i['type'], i['groupId']) for i in copied] == [
        ('Report', 'Task', 'g-1'), ('Trip', 'Event', 'g-2'),
    ]
    assert client.post('/api/import', data=b'garbage', content_type='text/calendar').status_code == 400


def test_non_object_body_is_rejected(client):
    item_id = _create(client).get_json()['items'][0]['id']
    assert client.post('/api/items', json=['Standup']).status_code == 400
    assert client.put(f'/api/items/{item_id}', json=['x']).status_code == 400
    assert client.post('/api/groups', json='Chores').status_code == 400
    assert len(client.get('/api/items').get_json()) == 1


def test_huge_interval_creates_only_the_base(client):
    response = _create(client, recurrence={'mode': 'interval', 'count': 9000, 'unit': 'year'})
    assert response.status_code == 201
    assert len(response.get_json()['items']) == 1
