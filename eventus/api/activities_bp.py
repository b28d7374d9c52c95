from flask import Blueprint, current_app, g, request, jsonify

from eventus.schemas import activity_schema
from eventus.utils.auth_helpers import require_privileged, require_token
from eventus.utils.proxy_helpers import internal_error, proxy, registration_action

activities_bp = Blueprint('activities', __name__, url_prefix='/api')
activity_registrations_bp = Blueprint(
    'activity_registrations', __name__, url_prefix='/api/activity-registrations')

# Criar atividade de um evento


@activities_bp.route('/activities', methods=['POST'])
@require_token
@require_privileged
def create_activity():
    try:
        event_id = request.args.get('eventId', type=int)
        if event_id is None:
            return jsonify({'message': 'eventId é obrigatório'}), 400

        payload = request.get_json(silent=True) or {}
        errors = activity_schema.validate(payload)
        if errors:
            return jsonify({'message': 'Dados inválidos', 'errors': errors}), 400

        current_app.logger.info(
            f"[activities] Criando atividade '{payload.get('name')}' no evento {event_id}")
        return proxy('POST', '/activities', params={'eventId': event_id}, json_body=payload)
    except Exception as e:
        return internal_error(e)


@activities_bp.route('/activities/<int:activity_id>', methods=['GET'])
@require_token
def get_activity(activity_id):
    try:
        return proxy('GET', f'/activities/{activity_id}')
    except Exception as e:
        return internal_error(e)


@activities_bp.route('/activities/<int:activity_id>', methods=['DELETE'])
@require_token
@require_privileged
def delete_activity(activity_id):
    try:
        return proxy('DELETE', f'/activities/{activity_id}')
    except Exception as e:
        return internal_error(e)

# Atividades em que o usuário está inscrito


@activities_bp.route('/my-activities', methods=['GET'])
@require_token
def my_activities():
    try:
        if not g.principal.subject_id:
            return jsonify({'message': 'ID do usuário não encontrado no token'}), 400
        return proxy('GET', '/activity-registrations/my-activities')
    except Exception as e:
        return internal_error(e)

# Inscrições em atividades


@activity_registrations_bp.route('/<int:activity_id>/register', methods=['POST'])
@require_token
def register(activity_id):
    try:
        # Com o evento informado a resposta traz o estado reconciliado
        event_id = request.args.get('eventId', type=int)
        if event_id is None:
            return proxy('POST', f'/activity-registrations/{activity_id}/register')
        return registration_action(
            event_id, lambda session: session.register_activity(activity_id))
    except Exception as e:
        return internal_error(e)


@activity_registrations_bp.route('/my-activities', methods=['GET'])
@require_token
def my_activities_list():
    try:
        return proxy('GET', '/activity-registrations/my-activities')
    except Exception as e:
        return internal_error(e)
