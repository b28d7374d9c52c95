"""Integração com o provedor de identidade (login por senha e cadastro de usuários).

O cadastro é uma sequência de chamadas administrativas; qualquer passo que
falhe interrompe a operação com uma mensagem localizada. Não há compensação:
se a atribuição de papel falhar, o usuário criado permanece sem papel.
"""

import logging

import requests
from flask import current_app

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    def __init__(self, message, status_code=500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class IdentityProvider:
    def __init__(self, base_url, realm, client_id, admin_realm='master',
                 admin_client_id='admin-cli', admin_username='admin',
                 admin_password='admin', timeout=10):
        self.base_url = base_url.rstrip('/')
        self.realm = realm
        self.client_id = client_id
        self.admin_realm = admin_realm
        self.admin_client_id = admin_client_id
        self.admin_username = admin_username
        self.admin_password = admin_password
        self.timeout = timeout

    @classmethod
    def from_app(cls):
        cfg = current_app.config
        return cls(
            cfg['IDENTITY_PROVIDER_URL'],
            cfg['IDENTITY_REALM'],
            cfg['IDENTITY_CLIENT_ID'],
            admin_realm=cfg.get('IDENTITY_ADMIN_REALM', 'master'),
            admin_client_id=cfg.get('IDENTITY_ADMIN_CLIENT_ID', 'admin-cli'),
            admin_username=cfg.get('IDENTITY_ADMIN_USERNAME', 'admin'),
            admin_password=cfg.get('IDENTITY_ADMIN_PASSWORD', 'admin'),
            timeout=cfg.get('REQUEST_TIMEOUT', 10),
        )

    # URLs

    def _token_url(self, realm):
        return f"{self.base_url}/realms/{realm}/protocol/openid-connect/token"

    def _admin_url(self, path):
        return f"{self.base_url}/admin/realms/{self.realm}/{path.lstrip('/')}"

    @staticmethod
    def _bearer(token, json_body=False):
        headers = {'Authorization': f'Bearer {token}'}
        if json_body:
            headers['Content-Type'] = 'application/json'
        return headers

    # Login

    def password_login(self, username, password):
        """Password grant no realm da aplicação. Devolve o payload do token."""
        try:
            resp = requests.post(
                self._token_url(self.realm),
                data={
                    'grant_type': 'password',
                    'client_id': self.client_id,
                    'username': username,
                    'password': password,
                },
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise IdentityError('Erro de conexão com o provedor de identidade', 503) from e

        if resp.status_code != 200:
            current_app.logger.warning(
                f"[identity] Login recusado para '{username}': {resp.status_code}")
            raise IdentityError('Credenciais inválidas', 401)

        return resp.json()

    # Cadastro

    def admin_token(self):
        resp = requests.post(
            self._token_url(self.admin_realm),
            data={
                'grant_type': 'password',
                'client_id': self.admin_client_id,
                'username': self.admin_username,
                'password': self.admin_password,
            },
            timeout=self.timeout,
        )
        if not resp.ok:
            current_app.logger.error(
                f"[identity] Falha ao obter token de administrador: {resp.text}")
            raise IdentityError('Falha ao obter token de administrador', 500)
        return resp.json().get('access_token')

    def create_user(self, admin_token, first_name, last_name, email, username, password):
        payload = {
            'firstName': first_name,
            'lastName': last_name,
            'email': email,
            'username': username,
            'enabled': True,
            'emailVerified': False,
            'attributes': {},
            'groups': [],
            'requiredActions': [],
            'credentials': [
                {'type': 'password', 'value': password, 'temporary': False}
            ],
        }
        resp = requests.post(
            self._admin_url('users'),
            headers=self._bearer(admin_token, json_body=True),
            json=payload,
            timeout=self.timeout,
        )
        if not resp.ok:
            body = resp.text or ''
            current_app.logger.error(f"[identity] Erro ao criar usuário: {body}")
            if 'username' in body:
                raise IdentityError('Nome de usuário já existe', 400)
            if 'email' in body:
                raise IdentityError('Email já está em uso', 400)
            raise IdentityError('Falha ao criar usuário', 400)

    def find_user_id(self, admin_token, username):
        resp = requests.get(
            self._admin_url('users'),
            headers=self._bearer(admin_token),
            params={'username': username, 'exact': 'true'},
            timeout=self.timeout,
        )
        if not resp.ok:
            raise IdentityError('Falha ao obter informações do usuário', 500)
        # A busca por username casa substrings: 'ana' também traz 'anabela'
        wanted = username.lower()
        for user in resp.json() or []:
            if (user.get('username') or '').lower() == wanted:
                return user['id']
        raise IdentityError('Usuário não encontrado após criação', 500)

    def find_client(self, admin_token):
        resp = requests.get(
            self._admin_url('clients'),
            headers=self._bearer(admin_token),
            timeout=self.timeout,
        )
        if not resp.ok:
            raise IdentityError('Falha ao obter clientes', 500)
        for client in resp.json():
            if client.get('clientId') == self.client_id:
                return client
        raise IdentityError(f'Cliente {self.client_id} não encontrado', 500)

    def find_role(self, admin_token, client_uuid, role_name):
        resp = requests.get(
            self._admin_url(f'clients/{client_uuid}/roles'),
            headers=self._bearer(admin_token),
            timeout=self.timeout,
        )
        if not resp.ok:
            raise IdentityError('Falha ao obter roles', 500)
        for role in resp.json():
            if role.get('name') == role_name:
                return role
        raise IdentityError(f'Role {role_name} não encontrada', 500)

    def assign_role(self, admin_token, user_id, client_uuid, role):
        resp = requests.post(
            self._admin_url(f'users/{user_id}/role-mappings/clients/{client_uuid}'),
            headers=self._bearer(admin_token, json_body=True),
            json=[role],
            timeout=self.timeout,
        )
        if not resp.ok:
            raise IdentityError('Falha ao atribuir role ao usuário', 500)

    def register_user(self, first_name, last_name, email, username, password, role):
        """Cria o usuário e atribui o papel do cliente da aplicação.

        Levanta IdentityError no primeiro passo que falhar.
        """
        try:
            token = self.admin_token()
            self.create_user(token, first_name, last_name, email, username, password)
            user_id = self.find_user_id(token, username)
            client = self.find_client(token)
            selected_role = self.find_role(token, client['id'], role)
            self.assign_role(token, user_id, client['id'], selected_role)
        except requests.exceptions.RequestException as e:
            current_app.logger.error(f"[identity] Erro de conexão no cadastro: {e}")
            raise IdentityError('Erro de conexão com o provedor de identidade', 503) from e

        current_app.logger.info(
            f"[identity] Usuário '{username}' criado com papel '{role}'")
        return user_id
