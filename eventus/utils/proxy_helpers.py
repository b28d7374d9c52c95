from flask import Response, current_app, g, jsonify

from eventus.services.backend_client import BackendClient, BackendUnavailable
from eventus.services.event_session import ActionInProgress, shared_session

MSG_CONNECTION_ERROR = "Erro de conexão com o backend"
MSG_INTERNAL_ERROR = "Erro interno do servidor"
MSG_IN_PROGRESS = "Operação já em andamento. Aguarde."


def backend_client():
    """Cliente do backend com o token da requisição atual (ver require_token)."""
    return BackendClient.from_app(g.token)


def upstream_error(resp):
    return jsonify({
        "message": f"Erro da API: {resp.status_code} {resp.reason}".strip(),
        "details": resp.text,
    }), resp.status_code


def forward(resp, success_status=None):
    """Repassa status e corpo do backend (JSON ou texto embrulhado)."""
    if not resp.ok:
        return upstream_error(resp)

    status = success_status or resp.status_code
    if status == 204:
        return Response(status=204)
    return jsonify(resp.data), status


def proxy(method, path, params=None, json_body=None, success_status=None):
    """Encaminha a chamada ao backend e traduz a resposta para o cliente."""
    try:
        resp = backend_client().request(method, path, params=params, json_body=json_body)
    except BackendUnavailable as e:
        return connection_error(e)
    return forward(resp, success_status)


def connection_error(e):
    return jsonify({"message": MSG_CONNECTION_ERROR, "error": str(e)}), 503


def internal_error(e):
    current_app.logger.exception(f"[api] Erro inesperado: {e}")
    return jsonify({"message": MSG_INTERNAL_ERROR, "error": str(e)}), 500


def attachment(content, mimetype, filename):
    resp = Response(content, mimetype=mimetype)
    resp.headers['Content-Disposition'] = f'attachment; filename="{filename}"'
    return resp


def registration_action(event_id, action):
    """Executa `action(session)` na sessão do evento e devolve o estado reconciliado.

    O snapshot é buscado antes da ação e de novo depois dela; a resposta traz
    o estado de inscrição do usuário já reconciliado com o servidor.
    """
    with shared_session(g.token, g.principal, event_id) as session:
        if not session.load():
            return session_error(session)
        try:
            ok = action(session)
        except ActionInProgress as e:
            current_app.logger.info(f"[api] Ação '{e}' já em andamento no evento {event_id}")
            return jsonify({"message": MSG_IN_PROGRESS}), 409
        if not ok:
            return session_error(session)
        return jsonify({
            "eventId": event_id,
            "status": session.view_state.to_dict(),
        }), 200


def session_error(session):
    status = session.error_status or 500
    if status == 503:
        return jsonify({"message": MSG_CONNECTION_ERROR, "error": session.error_details}), 503
    return jsonify({"message": session.error, "details": session.error_details}), status
