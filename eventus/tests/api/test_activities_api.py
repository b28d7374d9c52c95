from eventus.tests.conftest import make_token


def test_create_activity_needs_event_id(client, mock_backend, auth_headers):
    response = client.post('/api/activities', headers=auth_headers,
                           json={'name': 'Palestra', 'activityDate': '2024-05-10'})
    assert response.status_code == 400
    mock_backend.assert_not_called()


def test_create_activity_validates_and_forwards(client, mock_backend, auth_headers):
    response = client.post('/api/activities?eventId=10', headers=auth_headers,
                           json={'name': '', 'activityDate': 'ontem'})
    assert response.status_code == 400
    errors = response.get_json()['errors']
    assert 'name' in errors and 'activityDate' in errors

    mock_backend.respond(201, {'id': 3}, reason='Created')
    payload = {'name': 'Palestra', 'activityDate': '2024-05-10', 'category': 'Tecnologia'}
    response = client.post('/api/activities?eventId=10', headers=auth_headers, json=payload)
    assert response.status_code == 201
    args, kwargs = mock_backend.call_args
    assert args == ('POST', 'http://backend.test/activities')
    assert kwargs['params'] == {'eventId': 10}
    assert kwargs['json'] == payload


def test_create_activity_forbidden_for_participants(client, mock_backend, user_headers):
    response = client.post('/api/activities?eventId=10', headers=user_headers,
                           json={'name': 'Palestra', 'activityDate': '2024-05-10'})
    assert response.status_code == 403


def test_get_and_delete_activity(client, mock_backend, auth_headers, user_headers):
    mock_backend.respond(200, {'id': 3, 'name': 'Palestra'})
    assert client.get('/api/activities/3', headers=user_headers).get_json()['id'] == 3

    assert client.delete('/api/activities/3', headers=user_headers).status_code == 403
    mock_backend.respond(204)
    assert client.delete('/api/activities/3', headers=auth_headers).status_code == 204


def test_activity_registration(client, mock_backend, user_headers):
    mock_backend.respond(200, {'id': 90, 'registered': True})
    response = client.post('/api/activity-registrations/3/register', headers=user_headers)
    assert response.status_code == 200
    assert mock_backend.call_args.args == (
        'POST', 'http://backend.test/activity-registrations/3/register')


def test_my_activities_requires_subject(client, mock_backend):
    token = make_token({'resource_access': {'eventus-rest-api': {'roles': ['client_user']}}})
    response = client.get('/api/my-activities', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 400
    mock_backend.assert_not_called()


def test_my_activities_forwards(client, mock_backend, user_headers):
    mock_backend.respond(200, [{'id': 1}])
    response = client.get('/api/my-activities', headers=user_headers)
    assert response.get_json() == [{'id': 1}]
    assert mock_backend.call_args.args[1] == 'http://backend.test/activity-registrations/my-activities'
