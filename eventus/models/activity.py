from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Union

from eventus.models.registration import ActivityRegistration


@dataclass
class Activity:
    id: Optional[int] = None
    name: str = ''
    location: Optional[str] = None
    description: Optional[str] = None
    activity_date: Optional[Union[date, datetime]] = None
    activity_time: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    photo: Optional[str] = None
    # Referência ao evento dono (não é dona do evento)
    event_id: Optional[int] = None
    registrations: List[ActivityRegistration] = field(default_factory=list)

    def __repr__(self):
        return f'<Activity {self.name}>'
