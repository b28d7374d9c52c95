import pytest

from eventus.tests.conftest import claims_for, make_token


def _token_response(mocker, status_code=200, json_data=None):
    resp = mocker.Mock()
    resp.status_code = status_code
    resp.ok = status_code == 200
    resp.text = ''
    resp.json.return_value = json_data or {}
    return resp


def test_login_sets_cookie_with_token_lifetime(client, mocker):
    """Test de login contra o provedor de identidade (mock)"""
    token = make_token(claims_for('u1', 'client_user', 'ana'))
    post = mocker.patch('requests.post', return_value=_token_response(
        mocker, 200, {'access_token': token, 'expires_in': 300}))

    response = client.post('/api/auth/login', json={'username': 'ana', 'password': 'segredo'})

    assert response.status_code == 200
    data = response.get_json()
    assert data['access_token'] == token
    assert data['user']['role'] == 'client_user'
    assert data['user']['subject_id'] == 'u1'

    cookie = response.headers['Set-Cookie']
    assert cookie.startswith(f'token={token}')
    assert 'Max-Age=300' in cookie
    assert 'Path=/' in cookie

    called_url = post.call_args.args[0]
    assert called_url == 'http://identity.test/realms/lucassousa/protocol/openid-connect/token'
    assert post.call_args.kwargs['data']['grant_type'] == 'password'


def test_login_invalid_credentials(client, mocker):
    """Test de login com credenciais inválidas"""
    mocker.patch('requests.post', return_value=_token_response(mocker, 401))
    response = client.post('/api/auth/login', json={'username': 'ana', 'password': 'x'})
    assert response.status_code == 401
    assert response.get_json()['message'] == 'Credenciais inválidas'


def test_login_requires_fields(client):
    response = client.post('/api/auth/login', json={'username': 'ana'})
    assert response.status_code == 400
    assert 'password' in response.get_json()['errors']


def test_logout_clears_cookie(client):
    response = client.post('/api/auth/logout')
    assert response.status_code == 200
    cookie = response.headers['Set-Cookie']
    assert cookie.startswith('token=;')
    assert 'Max-Age=0' in cookie


@pytest.mark.parametrize('missing', ['firstName', 'lastName', 'email', 'username', 'password', 'role'])
def test_register_requires_all_fields(client, missing):
    payload = {
        'firstName': 'Ana', 'lastName': 'Souza', 'email': 'ana@ifpb.edu.br',
        'username': 'ana', 'password': 'segredo', 'role': 'client_user',
    }
    payload.pop(missing)
    response = client.post('/api/auth/register', json=payload)
    assert response.status_code == 400
    assert missing in response.get_json()['errors']


def test_register_reports_duplicate_username(client, mocker):
    admin = _token_response(mocker, 200, {'access_token': 'admin-tok'})
    conflict = _token_response(mocker, 409)
    conflict.ok = False
    conflict.text = '{"errorMessage":"User exists with same username"}'
    mocker.patch('requests.post', side_effect=[admin, conflict])

    response = client.post('/api/auth/register', json={
        'firstName': 'Ana', 'lastName': 'Souza', 'email': 'ana@ifpb.edu.br',
        'username': 'ana', 'password': 'segredo', 'role': 'client_user',
    })
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Nome de usuário já existe'


def test_session_from_cookie_or_header(client, user_token, user_headers):
    assert client.get('/api/auth/session').status_code == 401

    response = client.get('/api/auth/session', headers=user_headers)
    assert response.status_code == 200
    assert response.get_json()['user']['username'] == 'participante'

    client.set_cookie('token', user_token)
    assert client.get('/api/auth/session').status_code == 200


def test_session_without_known_role_is_unauthenticated(client):
    token = make_token({'sub': 'u9', 'resource_access': {'eventus-rest-api': {'roles': ['uma_authorization']}}})
    response = client.get('/api/auth/session', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 401
