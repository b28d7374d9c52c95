from flask import Blueprint, current_app, g, request, jsonify
from marshmallow import ValidationError

from eventus.schemas import event_schema
from eventus.services.backend_client import BackendError, BackendUnavailable
from eventus.services.registration_service import reconcile
from eventus.utils.auth_helpers import require_privileged, require_token
from eventus.utils.proxy_helpers import (
    backend_client,
    connection_error,
    internal_error,
    proxy,
    registration_action,
)

events_bp = Blueprint('events', __name__, url_prefix='/api/events')
event_registrations_bp = Blueprint(
    'event_registrations', __name__, url_prefix='/api/event-registrations')

# Listar eventos


@events_bp.route('', methods=['GET'])
@require_token
def get_events():
    try:
        return proxy('GET', '/events')
    except Exception as e:
        return internal_error(e)

# Criar evento


@events_bp.route('', methods=['POST'])
@require_token
@require_privileged
def create_event():
    try:
        payload = request.get_json(silent=True) or {}
        errors = event_schema.validate(payload)
        if errors:
            return jsonify({'message': 'Dados inválidos', 'errors': errors}), 400

        current_app.logger.info(f"[events] Criando evento '{payload.get('name')}'")
        return proxy('POST', '/events', json_body=payload)
    except Exception as e:
        return internal_error(e)


@events_bp.route('/<int:event_id>', methods=['GET'])
@require_token
def get_event(event_id):
    try:
        return proxy('GET', f'/events/{event_id}')
    except Exception as e:
        return internal_error(e)


@events_bp.route('/<int:event_id>', methods=['DELETE'])
@require_token
@require_privileged
def delete_event(event_id):
    try:
        return proxy('DELETE', f'/events/{event_id}')
    except Exception as e:
        return internal_error(e)

# Estado de inscrição do usuário no evento e nas atividades


@events_bp.route('/<int:event_id>/registration-status', methods=['GET'])
@require_token
def registration_status(event_id):
    try:
        snapshot = backend_client().get_event(event_id)
        state = reconcile(snapshot, g.principal.subject_id)
        return jsonify({
            'eventId': event_id,
            'user': g.principal.to_dict(),
            'status': state.to_dict(),
        }), 200

    except BackendError as e:
        return jsonify({'message': e.message, 'details': e.details}), e.status_code
    except BackendUnavailable as e:
        return connection_error(e)
    except ValidationError as err:
        return jsonify({'message': 'Snapshot de evento inválido', 'errors': err.messages}), 502
    except Exception as e:
        return internal_error(e)

# Inscrições em eventos


@event_registrations_bp.route('/<int:event_id>/register', methods=['POST'])
@require_token
def register(event_id):
    try:
        current_app.logger.info(
            f"[registrations] {g.principal.subject_id} inscrevendo-se no evento {event_id}")
        return registration_action(event_id, lambda session: session.register())
    except Exception as e:
        return internal_error(e)


@event_registrations_bp.route('/<int:registration_id>', methods=['DELETE'])
@require_token
def cancel(registration_id):
    """Cancela a inscrição.

    Com `?eventId=` o cancelamento passa pela sessão do evento e a resposta
    traz o estado reconciliado; sem ele o backend é chamado diretamente.
    """
    try:
        event_id = request.args.get('eventId', type=int)
        if event_id is None:
            return proxy('DELETE', f'/event-registrations/{registration_id}')
        return registration_action(
            event_id, lambda session: session.cancel(registration_id))
    except Exception as e:
        return internal_error(e)


@event_registrations_bp.route('/my-events', methods=['GET'])
@require_token
def my_events():
    try:
        return proxy('GET', '/event-registrations/my-events')
    except Exception as e:
        return internal_error(e)
