"""
➡️ But : Définir la structure des tables de la base (ORM).

Représente les utilisateurs et leurs rôles (ROLE_USER, ROLE_EMPLOYEE, ROLE_MODERATOR, ROLE_ADMIN).

`admin_slot` vaut 1 pour l'unique administrateur et NULL pour les autres :
la contrainte UNIQUE garantit au niveau base qu'il n'existe qu'un seul admin.
"""

from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import Column, Integer, JSON
from sqlmodel import Field, Relationship

from .base import BaseModelDB

if TYPE_CHECKING:
    from .bookings import Booking

ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"
ROLE_EMPLOYEE = "ROLE_EMPLOYEE"
ROLE_MODERATOR = "ROLE_MODERATOR"

ADMIN_SLOT = 1


class User(BaseModelDB, table=True):
    email: str = Field(index=True, unique=True, max_length=180)
    hashed_password: str
    first_name: Optional[str] = Field(default=None, max_length=64)
    last_name: Optional[str] = Field(default=None, max_length=64)

    roles: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    admin_slot: Optional[int] = Field(default=None, sa_column=Column(Integer, unique=True, nullable=True))

    bookings: List["Booking"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )

    def get_roles(self) -> List[str]:
        """Rôles effectifs : ROLE_USER est toujours implicite."""
        roles = list(dict.fromkeys(self.roles or []))
        if ROLE_USER not in roles:
            roles.append(ROLE_USER)
        return roles

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in (self.roles or [])
