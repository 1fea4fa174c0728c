"""
➡️ But : Définir les formats de sortie des comptes utilisateurs.

Empêche d'exposer par erreur des infos sensibles (hash de mot de passe, admin_slot).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from catalog.db.models.users import User


class UserOut(BaseModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    roles: List[str]
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        """Rôles effectifs (ROLE_USER implicite) plutôt que la colonne brute."""
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            roles=user.get_roles(),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserListOut(BaseModel):
    items: List[UserOut]
    total: int
