EVENTS = [
    {
        'id': 1,
        'name': 'Congresso',
        'eventDate': '2024-05-10',
        'activities': [
            {'id': 11, 'name': 'Abertura', 'activityDate': '2024-05-10T00:00:00', 'category': 'Tecnologia'},
            {'id': 12, 'name': 'Encerramento', 'activityDate': '2024-05-10T23:59:00', 'category': 'Design'},
        ],
    },
    {
        'id': 2,
        'name': 'Workshop',
        'eventDate': '2024-06-02',
        'location': 'Sala 3',
        'activities': [],
    },
]


def _route_backend(mock_backend, mocker, my_events=None, my_activities=None, my_status=200):
    """Responde conforme a URL pedida."""
    import json

    def fake(method, url, **kwargs):
        resp = mocker.Mock()
        resp.reason = 'OK'
        resp.status_code = 200
        if url.endswith('/event-registrations/my-events'):
            resp.status_code = my_status
            body = my_events or []
        elif url.endswith('/activity-registrations/my-activities'):
            resp.status_code = my_status
            body = my_activities or []
        else:
            body = EVENTS
        resp.text = json.dumps(body)
        return resp

    mock_backend.side_effect = fake


def test_calendar_month(client, mock_backend, mocker, user_headers):
    _route_backend(mock_backend, mocker, my_events=[{'id': 1}], my_activities=[{'id': 12}])

    response = client.get('/api/calendar?year=2024&month=5', headers=user_headers)

    assert response.status_code == 200
    data = response.get_json()
    assert data['title'] == 'maio 2024'
    assert data['previous'] == {'year': 2024, 'month': 4}
    assert data['next'] == {'year': 2024, 'month': 6}
    assert data['categories'] == ['Tecnologia', 'Design']
    assert data['noCategories'] is False
    assert len(data['days']) == 31

    tenth = data['days'][9]
    assert tenth['date'] == '2024-05-10'
    assert tenth['eventCount'] == 1
    assert tenth['activityCount'] == 2
    registered = {(i['type'], i['id']): i['isRegistered'] for i in tenth['items']}
    assert registered == {('event', 1): True, ('activity', 11): False, ('activity', 12): True}


def test_calendar_filters_and_selected_day(client, mock_backend, mocker, user_headers):
    _route_backend(mock_backend, mocker, my_events=[{'id': 1}], my_activities=[{'id': 12}])

    response = client.get(
        '/api/calendar?year=2024&month=5&registered_only=true&category=Design&day=2024-05-10',
        headers=user_headers)

    data = response.get_json()
    assert data['selectedDay'] == '2024-05-10'
    assert [(i['type'], i['id']) for i in data['selectedItems']] == [('event', 1), ('activity', 12)]


def test_calendar_tolerates_missing_registration_lists(client, mock_backend, mocker, user_headers):
    _route_backend(mock_backend, mocker, my_status=500)
    response = client.get('/api/calendar?year=2024&month=6', headers=user_headers)
    assert response.status_code == 200
    june_second = response.get_json()['days'][1]
    assert june_second['items'][0]['isRegistered'] is False
    assert june_second['items'][0]['location'] == 'Sala 3'


def test_calendar_rejects_bad_params(client, mock_backend, user_headers):
    assert client.get('/api/calendar?month=13', headers=user_headers).status_code == 400
    assert client.get('/api/calendar?month=0', headers=user_headers).status_code == 400
    assert client.get('/api/calendar?year=0&month=5', headers=user_headers).status_code == 400
    assert client.get('/api/calendar?day=ontem', headers=user_headers).status_code == 400
    mock_backend.assert_not_called()


def test_calendar_no_categories(client, mock_backend, mocker, user_headers):
    mock_backend.respond(200, [])
    data = client.get('/api/calendar?year=2024&month=5', headers=user_headers).get_json()
    assert data['categories'] == []
    assert data['noCategories'] is True


def test_calendar_renders_when_registration_lists_are_unreachable(client, mock_backend, mocker,
                                                                   user_headers):
    import requests

    _route_backend(mock_backend, mocker)
    fake = mock_backend.side_effect

    def flaky(method, url, **kwargs):
        if '/my-' in url:
            raise requests.exceptions.ConnectionError('recusada')
        return fake(method, url, **kwargs)

    mock_backend.side_effect = flaky
    response = client.get('/api/calendar?year=2024&month=5', headers=user_headers)
    assert response.status_code == 200
    tenth = response.get_json()['days'][9]
    assert not any(i['isRegistered'] for i in tenth['items'])
