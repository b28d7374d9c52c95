from marshmallow import fields, validate, post_load, EXCLUDE
from eventus import ma
from eventus.models.activity import Activity
from eventus.schemas.fields import CalendarDate
from eventus.schemas.registration_schema import ActivityRegistrationSchema


class ActivitySchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Int(allow_none=True)
    name = fields.Str(required=True, validate=validate.Length(min=1, max=150))
    location = fields.Str(allow_none=True)
    description = fields.Str(allow_none=True)
    activity_date = CalendarDate(data_key='activityDate', required=True)
    activity_time = fields.Str(data_key='activityTime', allow_none=True)
    # Rótulos livres (ex.: palestra/oficina, Design/Tecnologia)
    type = fields.Str(allow_none=True)
    category = fields.Str(allow_none=True)
    # Foto em base64
    photo = fields.Str(allow_none=True)
    event_id = fields.Int(data_key='eventId', allow_none=True)
    registrations = fields.List(
        fields.Nested(ActivityRegistrationSchema), allow_none=True)

    @post_load
    def make_activity(self, data, **kwargs):
        data['registrations'] = data.get('registrations') or []
        return Activity(**data)


activity_schema = ActivitySchema()
activities_schema = ActivitySchema(many=True)


def load_activity(payload):
    """Carrega um snapshot de atividade do backend (campos obrigatórios relaxados)."""
    return activity_schema.load(payload or {}, partial=True)
