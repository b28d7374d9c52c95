from flask import Blueprint, current_app, request, jsonify
from marshmallow import ValidationError

from eventus.schemas import load_activity
from eventus.services.attendance_service import (
    RosterState,
    count_presence,
    filter_participants,
    participants_from_registrations,
    toggle_presence,
)
from eventus.services.backend_client import BackendError, BackendUnavailable
from eventus.services.report_service import (
    attendance_filename,
    build_attendance_report,
    render_attendance_pdf,
    render_attendance_xlsx,
)
from eventus.utils.auth_helpers import require_privileged, require_token
from eventus.utils.datetime_utils import safe_iso
from eventus.utils.proxy_helpers import (
    MSG_CONNECTION_ERROR,
    attachment,
    backend_client,
    connection_error,
    internal_error,
    upstream_error,
)

attendance_bp = Blueprint('attendance', __name__, url_prefix='/api')

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def _load_roster(activity_id):
    """Atividade + participantes (lista completa e recorte pela busca `q`)."""
    data = backend_client().get_json(f'/activities/{activity_id}')
    activity = load_activity(data)
    participants = participants_from_registrations(activity.registrations)
    filtered = filter_participants(participants, request.args.get('q', ''))
    return activity, participants, filtered


def _roster_errors(func):
    from functools import wraps

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BackendError as e:
            return jsonify({'message': e.message, 'details': e.details}), e.status_code
        except BackendUnavailable as e:
            return connection_error(e)
        except ValidationError as err:
            return jsonify({'message': 'Atividade inválida', 'errors': err.messages}), 502
        except Exception as e:
            return internal_error(e)

    return wrapper

# Lista de presença de uma atividade


@attendance_bp.route('/activities/<int:activity_id>/attendance', methods=['GET'])
@require_token
@require_privileged
@_roster_errors
def get_attendance(activity_id):
    activity, participants, filtered = _load_roster(activity_id)
    return jsonify({
        'activity': {
            'id': activity.id,
            'name': activity.name,
            'activityDate': safe_iso(activity.activity_date),
        },
        'participants': [p.to_dict() for p in filtered],
        # Contagens sobre a lista completa, independente da busca
        'summary': count_presence(participants).to_dict(),
    }), 200

# Marcar presença / ausência


@attendance_bp.route('/attendance/<int:activity_id>/<user_id>', methods=['POST'])
@require_token
@require_privileged
@_roster_errors
def set_presence(activity_id, user_id):
    present = request.args.get('present', '').lower()
    if present not in ('true', 'false'):
        return jsonify({'message': "Parâmetro 'present' deve ser true ou false"}), 400

    client = backend_client()
    activity = load_activity(client.get_json(f'/activities/{activity_id}'))
    roster = RosterState.from_registrations(activity.registrations)
    participant = next((p for p in roster.participants if p.user_id == user_id), None)
    if participant is None:
        return jsonify({'message': 'Participante não encontrado nesta atividade'}), 404

    current_app.logger.info(
        f"[attendance] Atividade {activity_id}: {user_id} -> present={present}")

    sent = []

    def send(uid, value):
        resp = client.set_presence(activity_id, uid, value)
        sent.append(resp)
        return resp.ok

    roster, ok = toggle_presence(roster, participant.id, user_id, present == 'true', send)
    if not ok:
        if not sent:
            return jsonify({'message': MSG_CONNECTION_ERROR}), 503
        return upstream_error(sent[-1])

    return jsonify({
        'participant': roster.get(participant.id).to_dict(),
        'summary': roster.summary.to_dict(),
    }), 200

# Exportações


@attendance_bp.route('/activities/<int:activity_id>/attendance/report.pdf', methods=['GET'])
@require_token
@require_privileged
@_roster_errors
def attendance_pdf(activity_id):
    activity, _, filtered = _load_roster(activity_id)
    report = build_attendance_report(activity, filtered)
    return attachment(render_attendance_pdf(report), 'application/pdf',
                      attendance_filename(report, 'pdf'))


@attendance_bp.route('/activities/<int:activity_id>/attendance/report.xlsx', methods=['GET'])
@require_token
@require_privileged
@_roster_errors
def attendance_xlsx(activity_id):
    activity, _, filtered = _load_roster(activity_id)
    report = build_attendance_report(activity, filtered)
    return attachment(render_attendance_xlsx(report), XLSX_MIMETYPE,
                      attendance_filename(report, 'xlsx'))
