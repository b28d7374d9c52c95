import calendar
import zoneinfo
from datetime import date, datetime, timezone
from marshmallow import ValidationError

MONTHS_PT = (
    'janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
    'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro',
)


def parse_calendar_value(value):
    """Parseia uma data do backend.

    Aceita objetos date/datetime, 'YYYY-MM-DD' (devolve date) ou ISO 8601 com
    horário (devolve datetime, mantendo o horário de parede informado).
    Lança ValidationError para entradas inválidas.
    """
    if value is None:
        return None

    if isinstance(value, (date, datetime)):
        return value

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        # Python < 3.11 não aceita o sufixo 'Z' em fromisoformat
        if s.endswith('Z'):
            s = s[:-1] + '+00:00'
        if 'T' not in s and ' ' not in s:
            try:
                return date.fromisoformat(s)
            except ValueError:
                raise ValidationError(f"Formato de data inválido: {value}")
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            raise ValidationError(f"Formato de data inválido: {value}")

    raise ValidationError(f"Valor de data não reconhecido: {value}")


def to_calendar_day(value):
    """Dia de calendário (ano/mês/dia) de um date ou datetime, ignorando o horário."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_calendar_value(value)
    return to_calendar_day(parsed)


def same_day(a, b) -> bool:
    """Igualdade por dia de calendário, não por timestamp."""
    if a is None or b is None:
        return False
    return to_calendar_day(a) == to_calendar_day(b)


def month_range(year: int, month: int):
    """(primeiro_dia, último_dia) do mês, inclusive."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def shift_month(year: int, month: int, delta: int):
    """Soma `delta` meses a (year, month) e devolve o novo par."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def format_long_date(value) -> str:
    """'10 de maio de 2024'; string vazia se não houver data."""
    day = to_calendar_day(value)
    if day is None:
        return ''
    return f"{day.day:02d} de {MONTHS_PT[day.month - 1]} de {day.year}"


def format_month_title(year: int, month: int) -> str:
    return f"{MONTHS_PT[month - 1]} {year}"


def format_timestamp(dt) -> str:
    """'dd/MM/yyyy às HH:mm'."""
    return dt.strftime('%d/%m/%Y às %H:%M')


def now_in_timezone(app_timezone='America/Sao_Paulo'):
    """Agora, no fuso da aplicação (UTC se o fuso não for reconhecido)."""
    try:
        tz = zoneinfo.ZoneInfo(app_timezone)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        tz = timezone.utc
    return datetime.now(tz)


def safe_iso(value):
    """ISO 8601 de um date/datetime; strings são devolvidas aparadas.

    Devolve None para valores vazios.
    """
    if not value:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip() or None
    return str(value)
