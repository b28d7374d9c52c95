from marshmallow import fields, post_load, EXCLUDE
from eventus import ma
from eventus.models.registration import EventRegistration, ActivityRegistration


class EventRegistrationSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Int(allow_none=True)
    user_id = fields.Str(data_key='userId', allow_none=True)
    user_name = fields.Str(data_key='userName', allow_none=True)
    email = fields.Str(allow_none=True)
    registered = fields.Bool(allow_none=True)

    @post_load
    def make_registration(self, data, **kwargs):
        # Campo ausente (ou nulo) conta como não inscrito
        data['registered'] = data.get('registered') is True
        return EventRegistration(**data)


class ActivityRegistrationSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Int(allow_none=True)
    user_id = fields.Str(data_key='userId', allow_none=True)
    user_name = fields.Str(data_key='userName', allow_none=True)
    email = fields.Str(allow_none=True)
    present = fields.Bool(allow_none=True)
    registered = fields.Bool(allow_none=True)

    @post_load
    def make_registration(self, data, **kwargs):
        return ActivityRegistration(**data)


event_registration_schema = EventRegistrationSchema()
event_registrations_schema = EventRegistrationSchema(many=True)
activity_registration_schema = ActivityRegistrationSchema()
activity_registrations_schema = ActivityRegistrationSchema(many=True)
