"""Cliente HTTP do backend REST (eventos, atividades, inscrições, planejamentos).

Todas as chamadas levam o bearer token do usuário. O corpo da resposta é
interpretado como JSON quando possível; caso contrário é embrulhado em
{"message": "Sucesso", "rawResponse": <texto>}.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from flask import current_app, has_app_context

from eventus.utils.token_utils import token_preview

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Resposta não-2xx do backend."""

    def __init__(self, status_code, message, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


class BackendUnavailable(Exception):
    """Falha de conexão/timeout ao falar com o backend."""


@dataclass
class BackendResponse:
    status_code: int
    reason: str
    text: str
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def error_message(self, default: Optional[str] = None) -> str:
        """Mensagem do backend quando extraível; senão `default` ou 'Erro <status>'."""
        if isinstance(self.data, dict):
            if 'rawResponse' in self.data:
                return self.data['rawResponse']
            if self.data.get('message'):
                return str(self.data['message'])
        return default or f"Erro {self.status_code}: {self.reason}"


def parse_body(text: str):
    """JSON quando possível, senão o texto cru embrulhado."""
    if not text:
        return {}
    try:
        return json.loads(text)
    except ValueError:
        return {'message': 'Sucesso', 'rawResponse': text}


def _log():
    return current_app.logger if has_app_context() else logger


class BackendClient:
    def __init__(self, base_url: str, token: str, timeout: int = 10):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout

    @classmethod
    def from_app(cls, token: str) -> 'BackendClient':
        """Cliente configurado a partir da app Flask atual."""
        return cls(
            current_app.config['BACKEND_API_URL'],
            token,
            timeout=current_app.config.get('REQUEST_TIMEOUT', 10),
        )

    def _headers(self, method: str, with_body: bool):
        headers = {
            'Authorization': f'Bearer {self.token}',
            'Accept': '*/*',
        }
        if with_body:
            headers['Content-Type'] = 'application/json'
        if method == 'DELETE':
            headers['X-HTTP-Method-Override'] = 'DELETE'
        return headers

    def request(self, method: str, path: str, params=None, json_body=None) -> BackendResponse:
        url = f"{self.base_url}/{path.lstrip('/')}"
        log = _log()
        log.info(f"[backend] {method} {url} (token {token_preview(self.token)})")

        try:
            resp = requests.request(
                method,
                url,
                headers=self._headers(method, json_body is not None),
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            log.error(f"[backend] Erro de conexão em {method} {url}: {e}")
            raise BackendUnavailable(str(e)) from e

        text = resp.text or ''
        result = BackendResponse(
            status_code=resp.status_code,
            reason=resp.reason or '',
            text=text,
            data=parse_body(text),
        )
        log.info(f"[backend] {method} {url} -> {result.status_code}")
        if not result.ok:
            log.error(f"[backend] Corpo da resposta de erro: {text}")
        return result

    def get_json(self, path: str, params=None):
        """GET que levanta BackendError quando o status não é 2xx."""
        resp = self.request('GET', path, params=params)
        if not resp.ok:
            raise BackendError(
                resp.status_code,
                f"Erro da API: {resp.status_code} {resp.reason}".strip(),
                resp.text,
            )
        return resp.data

    # Atalhos usados pelas sessões de página

    def get_event(self, event_id: int):
        return self.get_json(f'/events/{event_id}')

    def list_events(self):
        return self.get_json('/events')

    def my_events(self):
        return self.get_json('/event-registrations/my-events')

    def my_activities(self):
        return self.get_json('/activity-registrations/my-activities')

    def register_event(self, event_id: int) -> BackendResponse:
        return self.request('POST', f'/event-registrations/{event_id}/register')

    def cancel_event_registration(self, registration_id: int) -> BackendResponse:
        return self.request('DELETE', f'/event-registrations/{registration_id}')

    def register_activity(self, activity_id: int) -> BackendResponse:
        return self.request('POST', f'/activity-registrations/{activity_id}/register')

    def set_presence(self, activity_id: int, user_id: str, present: bool) -> BackendResponse:
        return self.request(
            'POST',
            f'/attendance/{activity_id}/{user_id}',
            params={'present': 'true' if present else 'false'},
        )
