from marshmallow import (
    fields, validate, post_load, validates_schema, ValidationError, EXCLUDE
)
from eventus import ma
from eventus.models.event import Event
from eventus.schemas.fields import CalendarDate
from eventus.schemas.activity_schema import ActivitySchema
from eventus.schemas.registration_schema import EventRegistrationSchema
from eventus.utils.datetime_utils import to_calendar_day


class EventSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Int(allow_none=True)
    name = fields.Str(required=True, validate=validate.Length(min=1, max=150))
    event_date = CalendarDate(data_key='eventDate', required=True)
    registration_deadline = CalendarDate(
        data_key='registrationDeadline', required=True)
    # Informativo; o backend decide se aplica a capacidade
    max_registrations = fields.Int(
        data_key='maxRegistrations', allow_none=True, validate=validate.Range(min=0))
    description = fields.Str(allow_none=True)
    photo = fields.Str(allow_none=True)
    location = fields.Str(allow_none=True)
    activities = fields.List(fields.Nested(ActivitySchema), allow_none=True)
    registrations = fields.List(
        fields.Nested(EventRegistrationSchema), allow_none=True)

    @validates_schema
    def validate_dates(self, data, **kwargs):
        # Snapshots do backend são aceitos como vierem
        if kwargs.get('partial'):
            return

        event_date = to_calendar_day(data.get('event_date'))
        deadline = to_calendar_day(data.get('registration_deadline'))

        if event_date and deadline and deadline > event_date:
            raise ValidationError(
                'O prazo de inscrição não pode ser posterior à data do evento',
                field_name='registrationDeadline')

    @post_load
    def make_event(self, data, **kwargs):
        data['activities'] = data.get('activities') or []
        data['registrations'] = data.get('registrations') or []
        return Event(**data)


event_schema = EventSchema()
events_schema = EventSchema(many=True)


def load_event(payload):
    """Carrega um snapshot de evento do backend.

    Snapshots não passam pela validação de criação: campos obrigatórios
    ficam relaxados e as atividades aninhadas também (partial se propaga).
    """
    return event_schema.load(payload or {}, partial=True)


def load_events(payload):
    return events_schema.load(payload or [], partial=True)
