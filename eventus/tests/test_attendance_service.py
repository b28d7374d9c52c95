import pytest

from eventus.models import ActivityRegistration
from eventus.services.attendance_service import (
    ParticipantNotFound,
    RosterState,
    ToggleInFlight,
    begin_toggle,
    confirm_toggle,
    count_presence,
    fail_toggle,
    filter_participants,
    participants_from_registrations,
    toggle_presence,
)


@pytest.fixture
def roster():
    registrations = [
        ActivityRegistration(id=1, user_id='u1', user_name='Ana Souza', email='ana@ifpb.edu.br', present=True),
        ActivityRegistration(id=2, user_id='u2', user_name='Bruno Lima', email='bruno@ifpb.edu.br', present=True),
        ActivityRegistration(id=3, user_id='u3', user_name='Carla Dias', email='carla@gmail.com', present=True),
        ActivityRegistration(id=4, user_id='u4', user_name='Davi Rocha', email='davi@gmail.com', present=False),
        ActivityRegistration(id=5, user_id='u5', user_name='Eva Melo', email=None, present=None),
    ]
    return RosterState.from_registrations(registrations)


def test_counts_three_present_two_absent(roster):
    summary = count_presence(roster.participants)
    assert summary.present_count == 3
    assert summary.absent_count == 2
    assert summary.total == 5
    assert roster.summary.to_dict() == {'presentCount': 3, 'absentCount': 2, 'total': 5}


def test_missing_present_counts_as_absent():
    participants = participants_from_registrations([ActivityRegistration(id=1, user_id='u1')])
    assert participants[0].present is False
    assert participants[0].loading is False


def test_filter_by_name_or_email_case_insensitive(roster):
    assert [p.id for p in filter_participants(roster.participants, 'GMAIL')] == [3, 4]
    assert [p.id for p in filter_participants(roster.participants, 'ana')] == [1]
    assert len(filter_participants(roster.participants, '  ')) == 5
    assert filter_participants(roster.participants, 'ninguém') == []


def test_begin_toggle_is_single_flight(roster):
    state = begin_toggle(roster, 4)
    assert state.get(4).loading
    with pytest.raises(ToggleInFlight):
        begin_toggle(state, 4)
    # Outro participante é independente
    assert begin_toggle(state, 5).get(5).loading


def test_confirm_and_fail(roster):
    state = confirm_toggle(begin_toggle(roster, 4), 4, True)
    assert state.get(4).present is True
    assert state.get(4).loading is False

    state = fail_toggle(begin_toggle(roster, 1), 1)
    assert state.get(1).present is True
    assert state.get(1).loading is False


def test_unknown_participant(roster):
    with pytest.raises(ParticipantNotFound):
        roster.get(99)


def test_toggle_presence_success(roster):
    calls = []

    def send(user_id, present):
        calls.append((user_id, present))
        return True

    state, ok = toggle_presence(roster, 4, 'u4', True, send)
    assert ok
    assert calls == [('u4', True)]
    assert state.get(4).present is True
    assert state.summary.present_count == 4


def test_toggle_presence_failure_keeps_value(roster):
    state, ok = toggle_presence(roster, 1, 'u1', False, lambda user_id, present: False)
    assert not ok
    assert state.get(1).present is True
    assert state.get(1).loading is False


def test_toggle_presence_exception_is_failure(roster):
    def send(user_id, present):
        raise RuntimeError('rede caiu')

    state, ok = toggle_presence(roster, 1, 'u1', False, send)
    assert not ok
    assert state.get(1).present is True
    assert not state.get(1).loading


def test_toggle_presence_in_flight_issues_no_request(roster):
    in_flight = begin_toggle(roster, 2)
    calls = []
    state, ok = toggle_presence(in_flight, 2, 'u2', False,
                                lambda user_id, present: calls.append(user_id) or True)
    assert not ok
    assert calls == []
    assert state is in_flight
