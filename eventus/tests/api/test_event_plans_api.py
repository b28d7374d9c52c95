import pytest

PLAN = {
    'id': 4,
    'name': 'Semana Acadêmica',
    'eventDate': '2024-10-05',
    'microphones': 2,
    'projectors': 1,
    'rooms': 'Sala 1\nAuditório',
    'members': 'Ana\nBruno',
}


def test_list_plans_default_paging(client, mock_backend, user_headers):
    mock_backend.respond(200, {'content': [PLAN], 'totalPages': 1})
    response = client.get('/api/event-plans', headers=user_headers)
    assert response.status_code == 200
    assert response.get_json()['content'][0]['name'] == 'Semana Acadêmica'
    assert mock_backend.call_args.kwargs['params'] == {'page': '0', 'size': '10'}


def test_list_plans_forwards_search(client, mock_backend, user_headers):
    client.get('/api/event-plans?page=2&size=5&search=semana', headers=user_headers)
    assert mock_backend.call_args.kwargs['params'] == {'page': '2', 'size': '5', 'search': 'semana'}


@pytest.mark.parametrize('payload', [{}, {'name': 'X'}, {'eventDate': '2024-10-05'}])
def test_create_and_update_require_name_and_date(client, mock_backend, user_headers, payload):
    for method in (client.post, client.put):
        url = '/api/event-plans' if method == client.post else '/api/event-plans/4'
        response = method(url, headers=user_headers, json=payload)
        assert response.status_code == 400
        assert response.get_json()['message'] == \
            'Dados incompletos. Nome e data do evento são obrigatórios.'
    mock_backend.assert_not_called()


def test_create_plan_with_raw_success_body(client, mock_backend, user_headers):
    mock_backend.respond(200, 'Plano criado')
    response = client.post('/api/event-plans', headers=user_headers, json=PLAN)
    assert response.status_code == 200
    assert response.get_json() == {'message': 'Sucesso', 'rawResponse': 'Plano criado'}


def test_update_plan_upstream_error(client, mock_backend, user_headers):
    mock_backend.respond(500, 'stack trace', reason='Internal Server Error')
    response = client.put('/api/event-plans/4', headers=user_headers, json=PLAN)
    assert response.status_code == 500
    assert response.get_json()['details'] == 'stack trace'


def test_delete_plan_returns_204(client, mock_backend, user_headers):
    mock_backend.respond(200, '')
    response = client.delete('/api/event-plans/4', headers=user_headers)
    assert response.status_code == 204
    assert response.data == b''
    assert response.headers['Access-Control-Allow-Origin'] == '*'


def test_export_plan_pdf(client, mock_backend, user_headers):
    mock_backend.respond(200, PLAN)
    response = client.get('/api/event-plans/4/pdf', headers=user_headers)
    assert response.status_code == 200
    assert response.mimetype == 'application/pdf'
    assert response.data.startswith(b'%PDF')
    assert 'planejamento-semana-acadêmica.pdf' in response.headers['Content-Disposition']
