from flask import Blueprint, current_app, request, jsonify
from marshmallow import ValidationError

from eventus.schemas import event_plan_schema
from eventus.services.backend_client import BackendError, BackendUnavailable
from eventus.services.report_service import event_plan_filename, render_event_plan_pdf
from eventus.utils.auth_helpers import require_token
from eventus.utils.proxy_helpers import (
    attachment,
    backend_client,
    connection_error,
    internal_error,
    proxy,
)

event_plans_bp = Blueprint('event_plans', __name__, url_prefix='/api/event-plans')

MSG_INCOMPLETE = "Dados incompletos. Nome e data do evento são obrigatórios."


def _incomplete(payload):
    return not payload.get('name') or not payload.get('eventDate')

# Listar planejamentos


@event_plans_bp.route('', methods=['GET'])
@require_token
def list_plans():
    try:
        params = {
            'page': request.args.get('page', '0'),
            'size': request.args.get('size', '10'),
        }
        search = request.args.get('search', '').strip()
        if search:
            params['search'] = search
        return proxy('GET', '/event-plans', params=params)
    except Exception as e:
        return internal_error(e)

# Criar planejamento


@event_plans_bp.route('', methods=['POST'])
@require_token
def create_plan():
    try:
        payload = request.get_json(silent=True) or {}
        if _incomplete(payload):
            return jsonify({'message': MSG_INCOMPLETE}), 400

        errors = event_plan_schema.validate(payload)
        if errors:
            return jsonify({'message': 'Dados inválidos', 'errors': errors}), 400

        return proxy('POST', '/event-plans', json_body=payload)
    except Exception as e:
        return internal_error(e)


@event_plans_bp.route('/<int:plan_id>', methods=['GET'])
@require_token
def get_plan(plan_id):
    try:
        return proxy('GET', f'/event-plans/{plan_id}')
    except Exception as e:
        return internal_error(e)


@event_plans_bp.route('/<int:plan_id>', methods=['PUT'])
@require_token
def update_plan(plan_id):
    try:
        payload = request.get_json(silent=True) or {}
        if _incomplete(payload):
            return jsonify({'message': MSG_INCOMPLETE}), 400

        errors = event_plan_schema.validate(payload)
        if errors:
            return jsonify({'message': 'Dados inválidos', 'errors': errors}), 400

        return proxy('PUT', f'/event-plans/{plan_id}', json_body=payload)
    except Exception as e:
        return internal_error(e)


@event_plans_bp.route('/<int:plan_id>', methods=['DELETE'])
@require_token
def delete_plan(plan_id):
    try:
        current_app.logger.info(f"[event-plans] Excluindo planejamento {plan_id}")
        return proxy('DELETE', f'/event-plans/{plan_id}', success_status=204)
    except Exception as e:
        return internal_error(e)

# Exportar planejamento em PDF


@event_plans_bp.route('/<int:plan_id>/pdf', methods=['GET'])
@require_token
def export_plan_pdf(plan_id):
    try:
        data = backend_client().get_json(f'/event-plans/{plan_id}')
        plan = event_plan_schema.load(data, partial=True)

        pdf = render_event_plan_pdf(
            plan,
            brand=current_app.config.get('REPORT_BRAND', 'EVENTUS'),
            app_timezone=current_app.config.get('APP_TIMEZONE'),
        )
        return attachment(pdf, 'application/pdf', event_plan_filename(plan))

    except BackendError as e:
        return jsonify({'message': e.message, 'details': e.details}), e.status_code
    except BackendUnavailable as e:
        return connection_error(e)
    except ValidationError as err:
        return jsonify({'message': 'Planejamento inválido', 'errors': err.messages}), 502
    except Exception as e:
        return internal_error(e)
