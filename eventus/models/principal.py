from dataclasses import dataclass, field
from typing import Optional, Tuple

ROLE_ADMIN = "admin"
ROLE_CLIENT_ADMIN = "client_admin"
ROLE_CLIENT_USER = "client_user"

# Ordem de precedência quando o token traz mais de um papel
ROLE_PRECEDENCE = (ROLE_ADMIN, ROLE_CLIENT_ADMIN, ROLE_CLIENT_USER)
PRIVILEGED_ROLES = (ROLE_ADMIN, ROLE_CLIENT_ADMIN)


@dataclass(frozen=True)
class Principal:
    """Usuário autenticado, derivado das claims do token.

    Todos os campos são opcionais: um token sem papel conhecido resulta em
    role=None, que deve ser tratado como não autenticado.
    """

    subject_id: Optional[str] = None
    username: Optional[str] = None
    roles: Tuple[str, ...] = field(default_factory=tuple)
    role: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.role is not None

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES

    def to_dict(self):
        return {
            "subject_id": self.subject_id,
            "username": self.username,
            "roles": list(self.roles),
            "role": self.role,
        }
