"""Controle de presença de uma atividade: contagens, busca e marcação.

A marcação de presença é em duas etapas: o participante fica "em andamento"
(loading) imediatamente, e o valor de `present` só muda depois que o backend
confirma. Em caso de falha apenas o marcador é desfeito.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Tuple

from eventus.models.participant import Participant

logger = logging.getLogger(__name__)


class ToggleInFlight(Exception):
    """Já existe uma marcação em andamento para este participante."""


class ParticipantNotFound(Exception):
    pass


@dataclass(frozen=True)
class AttendanceSummary:
    present_count: int
    absent_count: int

    @property
    def total(self) -> int:
        return self.present_count + self.absent_count

    def to_dict(self):
        return {
            'presentCount': self.present_count,
            'absentCount': self.absent_count,
            'total': self.total,
        }


def participants_from_registrations(registrations) -> List[Participant]:
    return [
        Participant(
            id=r.id,
            user_id=r.user_id,
            user_name=r.user_name,
            email=r.email,
            present=bool(r.present),
        )
        for r in registrations or []
    ]


def count_presence(participants) -> AttendanceSummary:
    present = sum(1 for p in participants if p.present)
    return AttendanceSummary(present_count=present,
                             absent_count=len(participants) - present)


def filter_participants(participants, query) -> List[Participant]:
    """Busca por nome ou email, sem diferenciar maiúsculas; vazio = todos."""
    query = (query or '').strip().lower()
    if not query:
        return list(participants)
    return [
        p for p in participants
        if query in (p.user_name or '').lower() or query in (p.email or '').lower()
    ]


@dataclass(frozen=True)
class RosterState:
    participants: Tuple[Participant, ...] = ()

    @classmethod
    def from_registrations(cls, registrations):
        return cls(tuple(participants_from_registrations(registrations)))

    def get(self, participant_id) -> Participant:
        for p in self.participants:
            if p.id == participant_id:
                return p
        raise ParticipantNotFound(participant_id)

    def _update(self, participant_id, **changes) -> 'RosterState':
        self.get(participant_id)
        return RosterState(tuple(
            replace(p, **changes) if p.id == participant_id else p
            for p in self.participants
        ))

    @property
    def summary(self) -> AttendanceSummary:
        return count_presence(self.participants)


def begin_toggle(state: RosterState, participant_id) -> RosterState:
    if state.get(participant_id).loading:
        raise ToggleInFlight(participant_id)
    return state._update(participant_id, loading=True)


def confirm_toggle(state: RosterState, participant_id, present: bool) -> RosterState:
    return state._update(participant_id, present=bool(present), loading=False)


def fail_toggle(state: RosterState, participant_id) -> RosterState:
    return state._update(participant_id, loading=False)


def toggle_presence(state: RosterState, participant_id, user_id, present: bool,
                    send: Callable[[str, bool], bool]):
    """Executa a marcação completa em torno de `send(user_id, present)`.

    `send` devolve True quando o backend confirmou. Devolve (novo_estado, ok).
    Um participante já em andamento não gera nova chamada.
    """
    try:
        state = begin_toggle(state, participant_id)
    except ToggleInFlight:
        logger.info(f"[attendance] Marcação já em andamento para {participant_id}")
        return state, False

    try:
        ok = bool(send(user_id, present))
    except Exception as e:
        logger.error(f"[attendance] Falha ao atualizar presença de {user_id}: {e}")
        ok = False

    if ok:
        return confirm_toggle(state, participant_id, present), True
    return fail_toggle(state, participant_id), False
