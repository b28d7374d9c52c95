import base64
import binascii
import json
import logging
from typing import Optional

from eventus.models.principal import Principal, ROLE_PRECEDENCE

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
DEFAULT_CLIENT_ID = "eventus-rest-api"


def get_token_from_request(request) -> Optional[str]:
    """Extrai o bearer token do header Authorization.

    Retorna None se o header estiver ausente ou não começar com 'Bearer '.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    parts = auth_header.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def get_token_from_cookies(request, cookie_name: str = "token") -> Optional[str]:
    """Lê o token salvo no cookie (vazio conta como ausente)."""
    token = request.cookies.get(cookie_name)
    return token or None


def decode_claims(token) -> dict:
    """Decodifica o payload (segmento do meio) de um token compacto.

    Não verifica assinatura: é apenas uma decodificação. Qualquer entrada
    malformada (menos de 2 segmentos, base64 inválido, UTF-8 inválido, JSON
    inválido ou que não seja objeto) devolve {} sem levantar exceção.
    """
    if not isinstance(token, str):
        return {}

    segments = token.split(".")
    if len(segments) < 2:
        return {}

    payload = segments[1].replace("-", "+").replace("_", "/")
    payload += "=" * (-len(payload) % 4)

    try:
        raw = base64.b64decode(payload, validate=True)
        claims = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError) as e:
        # UnicodeDecodeError e JSONDecodeError são subclasses de ValueError
        logger.debug(f"[token] Falha ao decodificar token: {e}")
        return {}

    if not isinstance(claims, dict):
        return {}
    return claims


def extract_roles(claims: dict, client_id: str = DEFAULT_CLIENT_ID) -> tuple:
    """Papéis do cliente em claims.resource_access[client_id].roles."""
    resource_access = claims.get("resource_access")
    if not isinstance(resource_access, dict):
        return ()
    client_access = resource_access.get(client_id)
    if not isinstance(client_access, dict):
        return ()
    roles = client_access.get("roles")
    if not isinstance(roles, list):
        return ()
    return tuple(r for r in roles if isinstance(r, str))


def resolve_role(roles) -> Optional[str]:
    """admin > client_admin > client_user; None se nenhum estiver presente."""
    for candidate in ROLE_PRECEDENCE:
        if candidate in roles:
            return candidate
    return None


def principal_from_claims(claims: dict, client_id: str = DEFAULT_CLIENT_ID) -> Principal:
    sub = claims.get("sub")
    username = claims.get("preferred_username")
    roles = extract_roles(claims, client_id)
    return Principal(
        subject_id=sub if isinstance(sub, str) and sub else None,
        username=username if isinstance(username, str) else None,
        roles=roles,
        role=resolve_role(roles),
    )


def principal_from_token(token, client_id: str = DEFAULT_CLIENT_ID) -> Principal:
    return principal_from_claims(decode_claims(token), client_id)


def token_preview(token: Optional[str]) -> str:
    """Primeiros 10 caracteres do token, para logs."""
    if not token:
        return "<vazio>"
    return f"{token[:10]}..."
