from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Participant:
    """Participante de uma atividade na tela de controle de presença.

    `loading` é um marcador local de requisição em andamento; não faz parte
    de nenhuma entidade persistida.
    """

    id: int
    user_id: Optional[str]
    user_name: Optional[str] = None
    email: Optional[str] = None
    present: bool = False
    loading: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'userName': self.user_name,
            'email': self.email,
            'present': self.present,
            'loading': self.loading,
        }
