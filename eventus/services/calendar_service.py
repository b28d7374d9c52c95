"""Agregação do calendário: eventos + atividades em itens datados, por dia."""

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import FrozenSet, List, Optional

from eventus.models.calendar_item import CalendarItem, ITEM_EVENT, ITEM_ACTIVITY
from eventus.utils.datetime_utils import month_range, same_day, shift_month, to_calendar_day

DEFAULT_EVENT_LOCATION = 'IFPB'


@dataclass(frozen=True)
class CalendarRegistration:
    """Ids em que o usuário está inscrito, vindos do reconciliador."""

    event_ids: FrozenSet[int] = field(default_factory=frozenset)
    activity_ids: FrozenSet[int] = field(default_factory=frozenset)

    @classmethod
    def from_states(cls, states):
        """Junta um RegistrationState por evento ({event_id: state})."""
        event_ids = set()
        activity_ids = set()
        for event_id, state in states.items():
            if state.event_registered:
                event_ids.add(event_id)
            activity_ids.update(state.registered_activity_ids)
        return cls(frozenset(event_ids), frozenset(activity_ids))


def build_calendar_items(events, registration: CalendarRegistration,
                         show_registered_only=False, selected_categories=()) -> List[CalendarItem]:
    """Itens do calendário, na ordem: todos os eventos, depois as atividades.

    Atividades seguem a ordem evento-depois-atividade da entrada. Nada é
    ordenado por data. O filtro de categorias vale apenas para atividades;
    conjunto vazio significa sem filtro.
    """
    categories = set(selected_categories or ())
    items = []

    for event in events:
        is_registered = event.id in registration.event_ids
        if show_registered_only and not is_registered:
            continue
        items.append(CalendarItem(
            id=event.id,
            type=ITEM_EVENT,
            name=event.name,
            date=event.event_date,
            location=event.location or DEFAULT_EVENT_LOCATION,
            is_registered=is_registered,
        ))

    for event in events:
        for activity in event.activities or []:
            is_registered = activity.id in registration.activity_ids
            if show_registered_only and not is_registered:
                continue
            if categories and activity.category not in categories:
                continue
            items.append(CalendarItem(
                id=activity.id,
                type=ITEM_ACTIVITY,
                name=activity.name,
                date=activity.activity_date,
                time=activity.activity_time,
                location=activity.location,
                category=activity.category,
                event_id=activity.event_id if activity.event_id is not None else event.id,
                event_name=event.name,
                is_registered=is_registered,
            ))

    return items


def available_categories(events) -> List[str]:
    """Categorias distintas das atividades, na ordem em que aparecem."""
    seen = []
    for event in events:
        for activity in event.activities or []:
            if activity.category and activity.category not in seen:
                seen.append(activity.category)
    return seen


def month_days(year: int, month: int) -> List[date]:
    first, last = month_range(year, month)
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def items_for_day(items, day) -> List[CalendarItem]:
    return [item for item in items if same_day(item.date, day)]


@dataclass(frozen=True)
class DayBucket:
    day: date
    items: tuple

    @property
    def event_count(self) -> int:
        return sum(1 for item in self.items if item.type == ITEM_EVENT)

    @property
    def activity_count(self) -> int:
        return sum(1 for item in self.items if item.type == ITEM_ACTIVITY)

    def to_dict(self):
        return {
            'date': self.day.isoformat(),
            'eventCount': self.event_count,
            'activityCount': self.activity_count,
            'items': [item.to_dict() for item in self.items],
        }


def bucket_month(items, year: int, month: int) -> List[DayBucket]:
    """Um balde por dia do mês (inclusive), mesmo os vazios."""
    return [DayBucket(day, tuple(items_for_day(items, day)))
            for day in month_days(year, month)]


# Estado da tela de calendário + redutores puros


@dataclass(frozen=True)
class CalendarViewState:
    year: int
    month: int
    selected_day: Optional[date] = None
    show_registered_only: bool = False
    selected_categories: tuple = ()

    @classmethod
    def for_today(cls, today: Optional[date] = None):
        today = today or date.today()
        return cls(year=today.year, month=today.month)


def select_day(state: CalendarViewState, day) -> CalendarViewState:
    """Selecionar o dia já selecionado desfaz a seleção."""
    day = to_calendar_day(day)
    if state.selected_day is not None and state.selected_day == day:
        return replace(state, selected_day=None)
    return replace(state, selected_day=day)


def change_month(state: CalendarViewState, delta: int) -> CalendarViewState:
    """Troca o mês exibido e limpa a seleção de dia."""
    year, month = shift_month(state.year, state.month, delta)
    return replace(state, year=year, month=month, selected_day=None)


def set_registered_only(state: CalendarViewState, flag: bool) -> CalendarViewState:
    return replace(state, show_registered_only=bool(flag))


def toggle_category(state: CalendarViewState, category: str) -> CalendarViewState:
    if category in state.selected_categories:
        remaining = tuple(c for c in state.selected_categories if c != category)
        return replace(state, selected_categories=remaining)
    return replace(state, selected_categories=state.selected_categories + (category,))


def day_items(state: CalendarViewState, items) -> List[CalendarItem]:
    if state.selected_day is None:
        return []
    return items_for_day(items, state.selected_day)
