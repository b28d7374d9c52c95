from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Union

from eventus.models.activity import Activity
from eventus.models.registration import EventRegistration


@dataclass
class Event:
    """Snapshot de um evento como devolvido pelo backend.

    Esta aplicação nunca altera o evento localmente: todo estado de tela é
    derivado de um snapshot recém-buscado.
    """

    id: Optional[int] = None
    name: str = ''
    event_date: Optional[Union[date, datetime]] = None
    registration_deadline: Optional[Union[date, datetime]] = None
    # Apenas informativo; a capacidade não é validada aqui
    max_registrations: Optional[int] = None
    description: Optional[str] = None
    photo: Optional[str] = None
    location: Optional[str] = None
    activities: List[Activity] = field(default_factory=list)
    registrations: List[EventRegistration] = field(default_factory=list)

    def __post_init__(self):
        for activity in self.activities:
            if activity.event_id is None:
                activity.event_id = self.id

    def __repr__(self):
        return f'<Event {self.name}>'
