from functools import wraps

from flask import current_app, g, jsonify, request

from eventus.models.principal import Principal
from eventus.utils.token_utils import (
    get_token_from_cookies,
    get_token_from_request,
    principal_from_token,
)

MSG_TOKEN_MISSING = "Token não fornecido"
MSG_FORBIDDEN = "Acesso negado. Requer papel de administrador."


def _client_id():
    return current_app.config.get("IDENTITY_CLIENT_ID", "eventus-rest-api")


def get_current_principal(allow_cookie=False) -> Principal:
    """Principal da requisição atual (vazio se não houver token)."""
    token = get_token_from_request(request)
    if not token and allow_cookie:
        token = get_token_from_cookies(
            request, current_app.config.get("TOKEN_COOKIE_NAME", "token")
        )
    if not token:
        return Principal()
    return principal_from_token(token, _client_id())


def require_token(func):
    """Decorador: exige 'Authorization: Bearer <token>'.

    Guarda o token em g.token e o principal decodificado em g.principal.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        token = get_token_from_request(request)
        if not token:
            current_app.logger.warning(
                f"[auth] Requisição sem token: {request.method} {request.path}"
            )
            return jsonify({"message": MSG_TOKEN_MISSING}), 401

        principal = principal_from_token(token, _client_id())
        if not principal.is_authenticated:
            current_app.logger.warning(
                f"[auth] Token inválido ou sem papel: {request.method} {request.path}"
            )
            return jsonify({"message": MSG_TOKEN_MISSING}), 401

        g.token = token
        g.principal = principal
        return func(*args, **kwargs)

    return wrapper


def require_privileged(func):
    """Decorador para exigir papel admin ou client_admin (usar após require_token)."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        principal = getattr(g, "principal", None)
        if principal is None or not principal.is_privileged:
            return jsonify({"message": MSG_FORBIDDEN}), 403
        return func(*args, **kwargs)

    return wrapper
