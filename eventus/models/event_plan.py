from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Union


def _numbered_lines(text):
    return [line.strip() for line in (text or '').split('\n') if line.strip()]


@dataclass
class EventPlan:
    """Planejamento de um evento (salas, equipe e equipamentos)."""

    id: Optional[int] = None
    name: str = ''
    event_date: Optional[Union[date, datetime]] = None
    microphones: int = 0
    projectors: int = 0
    # Texto livre, um item por linha
    rooms: str = ''
    members: str = ''

    @property
    def room_list(self) -> List[str]:
        return _numbered_lines(self.rooms)

    @property
    def member_list(self) -> List[str]:
        return _numbered_lines(self.members)

    def __repr__(self):
        return f'<EventPlan {self.name}>'
