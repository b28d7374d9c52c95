"""Sessão da tela de detalhe de um evento.

Uma instância por tela aberta: criada ao montar, descartada em `close()`.
Guarda o último snapshot do evento, o estado de inscrição reconciliado, a
sobreposição otimista pendente e o poller de re-verificação.

Regras:
- cada ação (inscrever, cancelar, inscrever em atividade) tem sua própria
  trava; repetir a ação enquanto a anterior está em andamento levanta
  ActionInProgress sem fazer nova chamada;
- depois de toda ação que altera inscrições o snapshot é buscado de novo e
  reconciliado; o snapshot autoritativo substitui a sobreposição;
- resultados que chegam depois de `close()` são descartados.

As rotas HTTP usam `shared_session`: requisições simultâneas do mesmo usuário
no mesmo evento compartilham a sessão e, portanto, as travas.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Optional

from flask import current_app

from eventus.services.backend_client import BackendClient, BackendError, BackendUnavailable
from eventus.services.poller import RegistrationPoller
from eventus.services.registration_service import (
    PENDING_CANCEL,
    PENDING_REGISTER,
    PendingRegistration,
    RegistrationState,
    apply_pending,
    reconcile,
    settle,
)
from eventus.schemas.event_schema import load_event

logger = logging.getLogger(__name__)

MSG_LOAD_FAILED = "Erro ao carregar evento. Tente novamente mais tarde."
MSG_REGISTER_FAILED = "Usuário já inscrito neste evento."
MSG_CANCEL_FAILED = "Não foi possível cancelar a inscrição."
MSG_NOT_REGISTERED = "Usuário não está inscrito neste evento."


class ActionInProgress(Exception):
    """A mesma ação já está em andamento nesta sessão."""


class EventDetailSession:
    def __init__(self, client, principal, event_id, poll_interval: float = 30,
                 poller_factory=RegistrationPoller):
        self.client = client
        self.principal = principal
        self.event_id = event_id
        self.poll_interval = poll_interval
        self.event = None
        self.state = RegistrationState()
        self.pending: Optional[PendingRegistration] = None
        self.error: Optional[str] = None
        # Status HTTP e corpo da última falha (503 sem corpo = backend fora do ar)
        self.error_status: Optional[int] = None
        self.error_details: Optional[str] = None
        self.closed = False
        self._busy = set()
        self._lock = threading.Lock()
        self._poller = poller_factory(self.refresh, poll_interval,
                                      name=f'event-{event_id}-registration')

    @classmethod
    def from_app(cls, token, principal, event_id):
        """Sessão configurada a partir da app Flask atual."""
        return cls(
            BackendClient.from_app(token),
            principal,
            event_id,
            poll_interval=current_app.config.get('REGISTRATION_POLL_INTERVAL', 30),
        )

    # Estado exposto para a tela

    @property
    def view_state(self) -> RegistrationState:
        """Estado com a sobreposição otimista aplicada."""
        return apply_pending(self.state, self.pending)

    @property
    def polling(self) -> bool:
        return self._poller.running

    def is_busy(self, action: str) -> bool:
        return action in self._busy

    # Ciclo de vida

    def load(self) -> bool:
        """Busca o snapshot e reconcilia. False (com `error`) se falhar."""
        try:
            snapshot = self.client.get_event(self.event_id)
        except BackendError as e:
            logger.error(f"[session] Falha ao carregar evento {self.event_id}: {e}")
            self._fail(MSG_LOAD_FAILED, e.status_code, e.details)
            return False
        except BackendUnavailable as e:
            logger.error(f"[session] Falha ao carregar evento {self.event_id}: {e}")
            self._fail(MSG_LOAD_FAILED, 503, str(e))
            return False
        return self.apply(snapshot)

    def refresh(self):
        """Re-verificação periódica (chamada pelo poller)."""
        self.load()

    def apply(self, snapshot) -> bool:
        """Aplica um snapshot autoritativo. Ignorado se a sessão já fechou."""
        with self._lock:
            if self.closed:
                logger.debug(f"[session] Resultado descartado: sessão {self.event_id} fechada")
                return False
            event = load_event(snapshot)
            authoritative = reconcile(event, self.principal.subject_id)
            state, diverged = settle(self.pending, authoritative)
            if diverged:
                logger.info(
                    f"[session] Estado otimista divergiu do servidor no evento {self.event_id}")
            self.event = event
            self.state = state
            self.pending = None
            self.error = None
            self.error_status = None
            self.error_details = None
        self._sync_poller()
        return True

    def close(self):
        with self._lock:
            self.closed = True
        self._poller.stop()

    def _fail(self, message, status=None, details=None):
        if self.closed:
            return
        self.error = message
        self.error_status = status
        self.error_details = details

    def _sync_poller(self):
        if self.closed or not self.state.event_registered:
            self._poller.stop()
        elif self.poll_interval:
            self._poller.start()

    @contextmanager
    def _action(self, name: str):
        with self._lock:
            if name in self._busy:
                raise ActionInProgress(name)
            self._busy.add(name)
        try:
            yield
        finally:
            with self._lock:
                self._busy.discard(name)

    # Ações

    def _mutate(self, pending: PendingRegistration, call, failure_message: str) -> bool:
        self.pending = pending
        try:
            resp = call()
        except BackendUnavailable as e:
            logger.error(f"[session] Erro de conexão: {e}")
            self.pending = None
            self._fail(failure_message, 503, str(e))
            return False

        if not resp.ok:
            self.pending = None
            self._fail(resp.error_message(failure_message), resp.status_code, resp.text)
            return False

        self.load()
        return True

    def register(self) -> bool:
        with self._action('register'):
            return self._mutate(
                PendingRegistration(PENDING_REGISTER),
                lambda: self.client.register_event(self.event_id),
                MSG_REGISTER_FAILED,
            )

    def cancel(self, registration_id: Optional[int] = None) -> bool:
        """Cancela a inscrição no evento (a reconciliada, se não for informada)."""
        with self._action('cancel'):
            if registration_id is None:
                registration_id = self.state.event_registration_id
            if registration_id is None:
                self._fail(MSG_NOT_REGISTERED, 400)
                return False
            ok = self._mutate(
                PendingRegistration(PENDING_CANCEL),
                lambda: self.client.cancel_event_registration(registration_id),
                MSG_CANCEL_FAILED,
            )
            if ok:
                self._sync_poller()
            return ok

    def register_activity(self, activity_id: int) -> bool:
        with self._action(f'activity:{activity_id}'):
            return self._mutate(
                PendingRegistration(PENDING_REGISTER, activity_id=activity_id),
                lambda: self.client.register_activity(activity_id),
                MSG_REGISTER_FAILED,
            )


_registry_lock = threading.Lock()
_open_sessions = {}


@contextmanager
def shared_session(token, principal, event_id):
    """Sessão do usuário no evento, compartilhada entre requisições simultâneas.

    Fechada quando a última requisição que a usa termina.
    """
    key = (principal.subject_id, event_id)
    with _registry_lock:
        entry = _open_sessions.get(key)
        if entry is None:
            entry = [EventDetailSession.from_app(token, principal, event_id), 0]
            _open_sessions[key] = entry
        entry[1] += 1
        session = entry[0]
    try:
        yield session
    finally:
        with _registry_lock:
            entry[1] -= 1
            if entry[1] == 0:
                del _open_sessions[key]
                session.close()
