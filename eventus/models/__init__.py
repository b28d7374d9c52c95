from eventus.models.principal import Principal
from eventus.models.registration import EventRegistration, ActivityRegistration
from eventus.models.activity import Activity
from eventus.models.event import Event
from eventus.models.event_plan import EventPlan
from eventus.models.calendar_item import CalendarItem
from eventus.models.participant import Participant

__all__ = [
    'Principal', 'EventRegistration', 'ActivityRegistration', 'Activity',
    'Event', 'EventPlan', 'CalendarItem', 'Participant'
]
