from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import Column, ForeignKey, Integer
from sqlmodel import Field, Relationship

from .base import BaseModelDB
from .links import ProductBookingLink

if TYPE_CHECKING:
    from .products import Product
    from .users import User

STATUS_AVAILABLE = "Disponible"
STATUS_UNAVAILABLE = "Indisponible"


class Booking(BaseModelDB, table=True):
    """Réservation d'un utilisateur portant sur un ou plusieurs produits."""

    quantity: int = Field(default=1, description="Quantité réservée")
    status: str = Field(default=STATUS_AVAILABLE, max_length=32, description="Disponible | Indisponible (dérivé des produits)")

    user_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("user.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        ),
        description="Propriétaire de la réservation",
    )

    user: Optional["User"] = Relationship(back_populates="bookings")
    products: List["Product"] = Relationship(back_populates="bookings", link_model=ProductBookingLink)
