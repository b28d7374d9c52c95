from marshmallow import fields, validate, post_load, EXCLUDE
from eventus import ma
from eventus.models.event_plan import EventPlan
from eventus.schemas.fields import CalendarDate


class EventPlanSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Int(allow_none=True)
    name = fields.Str(required=True, validate=validate.Length(min=1))
    event_date = CalendarDate(data_key='eventDate', required=True)
    microphones = fields.Int(load_default=0, validate=validate.Range(min=0))
    projectors = fields.Int(load_default=0, validate=validate.Range(min=0))
    rooms = fields.Str(load_default='', allow_none=True)
    members = fields.Str(load_default='', allow_none=True)

    @post_load
    def make_plan(self, data, **kwargs):
        data['rooms'] = data.get('rooms') or ''
        data['members'] = data.get('members') or ''
        return EventPlan(**data)


event_plan_schema = EventPlanSchema()
event_plans_schema = EventPlanSchema(many=True)
