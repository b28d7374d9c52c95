from flask import Blueprint, current_app, request, jsonify
from marshmallow import ValidationError

from eventus.schemas import load_events
from eventus.services.backend_client import BackendError, BackendUnavailable
from eventus.services.calendar_service import (
    CalendarRegistration,
    CalendarViewState,
    available_categories,
    bucket_month,
    build_calendar_items,
    day_items,
    select_day,
)
from eventus.services.registration_service import reconcile_from_lists
from eventus.utils.auth_helpers import require_token
from eventus.utils.datetime_utils import format_month_title, now_in_timezone, shift_month
from eventus.utils.proxy_helpers import backend_client, connection_error, internal_error

calendar_bp = Blueprint('calendar', __name__, url_prefix='/api/calendar')


def _view_state_from_args(args):
    """Estado da tela a partir da query string; mês atual por padrão."""
    today = now_in_timezone(current_app.config.get('APP_TIMEZONE', 'America/Sao_Paulo')).date()
    state = CalendarViewState.for_today(today)

    year = args.get('year', type=int)
    month = args.get('month', type=int)
    if year is None:
        year = state.year
    if month is None:
        month = state.month
    if not 1 <= month <= 12:
        raise ValidationError({'month': ['Mês deve estar entre 1 e 12']})
    if not 1 <= year <= 9999:
        raise ValidationError({'year': ['Ano inválido']})

    state = CalendarViewState(
        year=year,
        month=month,
        show_registered_only=args.get('registered_only', '').lower() in ('1', 'true', 'yes'),
        selected_categories=tuple(c for c in args.getlist('category') if c),
    )
    if args.get('day'):
        state = select_day(state, args.get('day'))
    return state


def _registered_list(fetch):
    """Listas de inscrição são opcionais: falha do backend vira lista vazia."""
    try:
        data = fetch()
    except BackendError as e:
        current_app.logger.warning(f"[calendar] Lista de inscrições indisponível: {e.message}")
        return []
    except BackendUnavailable as e:
        current_app.logger.warning(f"[calendar] Lista de inscrições indisponível: {e}")
        return []
    return data if isinstance(data, list) else []

# Calendário do mês (eventos + atividades)


@calendar_bp.route('', methods=['GET'])
@require_token
def get_calendar():
    try:
        state = _view_state_from_args(request.args)

        client = backend_client()
        events = load_events(client.list_events())
        my_events = _registered_list(client.my_events)
        my_activities = _registered_list(client.my_activities)

        registration = CalendarRegistration.from_states({
            event.id: reconcile_from_lists(event, my_events, my_activities)
            for event in events
        })
        items = build_calendar_items(
            events,
            registration,
            show_registered_only=state.show_registered_only,
            selected_categories=state.selected_categories,
        )
        categories = available_categories(events)
        prev_year, prev_month = shift_month(state.year, state.month, -1)
        next_year, next_month = shift_month(state.year, state.month, 1)

        return jsonify({
            'year': state.year,
            'month': state.month,
            'title': format_month_title(state.year, state.month),
            'previous': {'year': prev_year, 'month': prev_month},
            'next': {'year': next_year, 'month': next_month},
            'registeredOnly': state.show_registered_only,
            'selectedCategories': list(state.selected_categories),
            'categories': categories,
            'noCategories': not categories,
            'days': [bucket.to_dict() for bucket in bucket_month(items, state.year, state.month)],
            'selectedDay': state.selected_day.isoformat() if state.selected_day else None,
            'selectedItems': [item.to_dict() for item in day_items(state, items)],
        }), 200

    except ValidationError as err:
        return jsonify({'message': 'Parâmetros inválidos', 'errors': err.messages}), 400
    except BackendError as e:
        return jsonify({'message': e.message, 'details': e.details}), e.status_code
    except BackendUnavailable as e:
        return connection_error(e)
    except Exception as e:
        return internal_error(e)
