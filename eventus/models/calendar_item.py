from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

ITEM_EVENT = 'event'
ITEM_ACTIVITY = 'activity'


@dataclass(frozen=True)
class CalendarItem:
    """Projeção de um evento ou atividade no calendário.

    Recalculado a cada agregação; não tem ciclo de vida próprio.
    """

    id: int
    type: str
    name: str
    date: Optional[Union[date, datetime]]
    is_registered: bool = False
    time: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    event_id: Optional[int] = None
    event_name: Optional[str] = None

    def to_dict(self):
        from eventus.utils.datetime_utils import safe_iso

        return {
            'id': self.id,
            'type': self.type,
            'name': self.name,
            'date': safe_iso(self.date),
            'time': self.time,
            'location': self.location,
            'category': self.category,
            'eventId': self.event_id,
            'eventName': self.event_name,
            'isRegistered': self.is_registered,
        }
