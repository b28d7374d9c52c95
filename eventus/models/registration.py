from dataclasses import dataclass
from typing import Optional


@dataclass
class EventRegistration:
    id: Optional[int] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    email: Optional[str] = None
    # Ausente no backend equivale a False
    registered: bool = False

    def __repr__(self):
        return f'<EventRegistration User:{self.user_id} Registered:{self.registered}>'


@dataclass
class ActivityRegistration:
    id: Optional[int] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    email: Optional[str] = None
    # Marcador de presença (controle de presença da atividade)
    present: Optional[bool] = None
    # Só conta como inscrito quando vier explicitamente True
    registered: Optional[bool] = None

    def __repr__(self):
        return f'<ActivityRegistration User:{self.user_id} Present:{self.present}>'
