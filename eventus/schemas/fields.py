from marshmallow import fields
from eventus.utils.datetime_utils import parse_calendar_value, safe_iso


class CalendarDate(fields.Field):
    """Data do backend: 'YYYY-MM-DD' ou ISO com horário.

    Na carga devolve date (sem horário) ou datetime (com horário); na saída
    devolve a representação ISO.
    """

    default_error_messages = {"invalid": "Data inválida."}

    def _serialize(self, value, attr, obj, **kwargs):
        return safe_iso(value)

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, str):
            raise self.make_error("invalid")
        return parse_calendar_value(value)
