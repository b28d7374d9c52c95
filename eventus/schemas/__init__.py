from eventus.schemas.registration_schema import (
    event_registration_schema, event_registrations_schema,
    activity_registration_schema, activity_registrations_schema,
)
from eventus.schemas.activity_schema import activity_schema, activities_schema, load_activity
from eventus.schemas.event_schema import event_schema, events_schema, load_event, load_events
from eventus.schemas.event_plan_schema import event_plan_schema, event_plans_schema
from eventus.schemas.user_schema import user_login_schema, user_register_schema

__all__ = [
    'event_registration_schema', 'event_registrations_schema',
    'activity_registration_schema', 'activity_registrations_schema',
    'activity_schema', 'activities_schema', 'load_activity',
    'event_schema', 'events_schema', 'load_event', 'load_events',
    'event_plan_schema', 'event_plans_schema',
    'user_login_schema', 'user_register_schema',
]
