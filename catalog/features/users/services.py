"""
➡️ But : Gestion des comptes par l'administrateur (liste, suppression).
"""

import logging

from fastapi import HTTPException, status

from catalog.db.models.users import User
from catalog.db.repositories.users import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, repo: UserRepository):
        self.repo = repo

    def list(self, offset: int, limit: int):
        items = self.repo.list(offset, limit)
        total = self.repo.count()
        return {"items": items, "total": total}

    def get(self, user_id: int) -> User:
        user = self.repo.get(user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Utilisateur introuvable.")
        return user

    def delete(self, user_id: int) -> None:
        user = self.get(user_id)
        self.repo.delete(user)
        logger.info("Utilisateur %s supprimé", user_id)
