import base64
import json

import pytest

from eventus import create_app


def make_token(claims):
    """Token compacto sem assinatura, apenas para testes."""
    def _segment(data):
        raw = json.dumps(data).encode('utf-8')
        return base64.urlsafe_b64encode(raw).rstrip(b'=').decode('ascii')

    return f"{_segment({'alg': 'none', 'typ': 'JWT'})}.{_segment(claims)}.assinatura"


def claims_for(sub, role, username=None):
    return {
        'sub': sub,
        'preferred_username': username or sub,
        'resource_access': {'eventus-rest-api': {'roles': [role]}},
    }


@pytest.fixture
def app():
    """Aplicação com a configuração de testes"""
    _app = create_app('testing')
    with _app.app_context():
        yield _app


@pytest.fixture
def client(app):
    """Cliente de test"""
    return app.test_client()


@pytest.fixture
def admin_token():
    return make_token(claims_for('admin-1', 'admin', 'organizadora'))


@pytest.fixture
def user_token():
    return make_token(claims_for('u1', 'client_user', 'participante'))


@pytest.fixture
def auth_headers(admin_token):
    """Headers de autenticação para admin"""
    return {'Authorization': f'Bearer {admin_token}'}


@pytest.fixture
def user_headers(user_token):
    return {'Authorization': f'Bearer {user_token}'}


@pytest.fixture
def mock_backend(mocker):
    """Substitui requests.request; configure com `respond(status, body)`."""
    mocked = mocker.patch('requests.request')

    def respond(status_code=200, body=None, reason='OK'):
        resp = mocker.Mock()
        resp.status_code = status_code
        resp.reason = reason
        if body is None:
            resp.text = ''
        elif isinstance(body, str):
            resp.text = body
        else:
            resp.text = json.dumps(body)
        mocked.return_value = resp
        return resp

    mocked.respond = respond
    respond()
    return mocked


@pytest.fixture
def sample_event():
    """Snapshot de evento como o backend devolve (camelCase)."""
    return {
        'id': 10,
        'name': 'Semana de Tecnologia',
        'eventDate': '2024-05-10',
        'registrationDeadline': '2024-05-01',
        'maxRegistrations': 100,
        'location': 'Auditório',
        'registrations': [
            {'id': 7, 'userId': 'u1', 'userName': 'Ana', 'registered': True},
        ],
        'activities': [
            {
                'id': 1,
                'name': 'Palestra de abertura',
                'activityDate': '2024-05-10T09:00:00',
                'activityTime': '09:00',
                'category': 'Tecnologia',
                'registrations': [
                    {'id': 70, 'userId': 'u1', 'userName': 'Ana', 'registered': True},
                ],
            },
            {
                'id': 2,
                'name': 'Oficina de design',
                'activityDate': '2024-05-10T14:00:00',
                'activityTime': '14:00',
                'category': 'Design',
                'registrations': [],
            },
        ],
    }
