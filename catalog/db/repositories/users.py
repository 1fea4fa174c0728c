"""
➡️ But : Encapsuler toutes les opérations de base de données sur la table User.

Ne contient aucune logique métier, juste de la persistance.
"""

from typing import Optional
from sqlmodel import select

from catalog.db.repositories.base import BaseRepository
from catalog.db.models.users import User, ADMIN_SLOT

class UserRepository(BaseRepository[User]):
    """
    Repository pour la table User.
    Hérite du CRUD générique de BaseRepository.
    """
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        """Retourne un utilisateur par son email (insensible à la casse)."""
        return self.session.exec(
            select(self.model).where(self.model.email == email.strip().lower())
        ).first()

    def get_admin(self) -> Optional[User]:
        """Retourne l'administrateur unique s'il existe."""
        return self.session.exec(
            select(self.model).where(self.model.admin_slot == ADMIN_SLOT)
        ).first()
