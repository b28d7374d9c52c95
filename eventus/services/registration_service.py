"""Reconciliação do estado de inscrição do usuário a partir de um snapshot.

Tudo aqui é função pura: nenhuma chamada de rede, apenas dados já buscados.
Deve ser reaplicado após cada ação que altere inscrições (inscrever/cancelar),
sempre sobre o snapshot recém-buscado.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from eventus.models.event import Event
from eventus.schemas.event_schema import load_event

# Ações otimistas
PENDING_REGISTER = 'register'
PENDING_CANCEL = 'cancel'


@dataclass(frozen=True)
class RegistrationState:
    event_registered: bool = False
    event_registration_id: Optional[int] = None
    registered_activity_ids: FrozenSet[int] = field(default_factory=frozenset)

    def is_activity_registered(self, activity_id) -> bool:
        return activity_id in self.registered_activity_ids

    def to_dict(self):
        return {
            'eventRegistered': self.event_registered,
            'eventRegistrationId': self.event_registration_id,
            'registeredActivityIds': sorted(self.registered_activity_ids),
        }


def _as_event(event) -> Event:
    if isinstance(event, Event):
        return event
    return load_event(event)


def find_event_registration(event, subject_id):
    """Primeiro registro ativo do usuário no evento, ou None.

    Registros duplicados não são sinalizados: o primeiro que satisfaz vence.
    """
    if not subject_id:
        return None
    for registration in event.registrations or []:
        if registration.user_id == subject_id and registration.registered is True:
            return registration
    return None


def is_activity_registered(activity, subject_id) -> bool:
    # Sem campo `registered` explícito conta como não inscrito
    if not subject_id:
        return False
    return any(
        r.user_id == subject_id and r.registered is True
        for r in (activity.registrations or [])
    )


def reconcile(event, subject_id) -> RegistrationState:
    """Estado de inscrição de `subject_id` no evento e em cada atividade.

    Aceita um Event ou o dict cru do backend.
    """
    event = _as_event(event)

    registration = find_event_registration(event, subject_id)
    activity_ids = frozenset(
        activity.id
        for activity in (event.activities or [])
        if activity.id is not None and is_activity_registered(activity, subject_id)
    )

    return RegistrationState(
        event_registered=registration is not None,
        event_registration_id=registration.id if registration else None,
        registered_activity_ids=activity_ids,
    )


def reconcile_from_lists(event, my_events, my_activities) -> RegistrationState:
    """Mesmo estado, derivado das listas 'my-events' e 'my-activities'.

    Fonte alternativa para quem não tem o snapshot com inscrições embutidas
    (ex.: calendário). O id da inscrição não é conhecido nessa fonte.
    """
    event = _as_event(event)
    my_event_ids = {_item_id(e) for e in (my_events or [])}
    my_activity_ids = {_item_id(a) for a in (my_activities or [])}

    return RegistrationState(
        event_registered=event.id in my_event_ids,
        event_registration_id=None,
        registered_activity_ids=frozenset(
            a.id for a in (event.activities or []) if a.id in my_activity_ids
        ),
    )


def _item_id(item):
    if isinstance(item, dict):
        return item.get('id')
    return getattr(item, 'id', None)


# Estado otimista em duas fases


@dataclass(frozen=True)
class PendingRegistration:
    """Sobreposição otimista aplicada antes da confirmação do servidor.

    Nunca é verdade persistida: é descartada quando chega o próximo snapshot
    autoritativo.
    """

    action: str
    activity_id: Optional[int] = None


def apply_pending(state: RegistrationState, pending: Optional[PendingRegistration]) -> RegistrationState:
    """Visão otimista: `state` com a ação pendente já aplicada."""
    if pending is None:
        return state

    if pending.activity_id is not None:
        ids = set(state.registered_activity_ids)
        if pending.action == PENDING_REGISTER:
            ids.add(pending.activity_id)
        else:
            ids.discard(pending.activity_id)
        return RegistrationState(
            state.event_registered, state.event_registration_id, frozenset(ids))

    if pending.action == PENDING_REGISTER:
        return RegistrationState(
            True, state.event_registration_id, state.registered_activity_ids)
    return RegistrationState(False, None, state.registered_activity_ids)


def settle(pending: Optional[PendingRegistration], authoritative: RegistrationState):
    """Descarta a sobreposição diante do snapshot autoritativo.

    Devolve (estado, divergiu). Em caso de divergência o autoritativo vence.
    """
    if pending is None:
        return authoritative, False
    optimistic = apply_pending(authoritative, pending)
    return authoritative, optimistic != authoritative
