from typing import List, Optional, TYPE_CHECKING
from sqlmodel import Field, Relationship

from .base import BaseModelDB
from .links import ProductCategoryLink, ProductBookingLink

if TYPE_CHECKING:
    from .categories import Category
    from .pictures import Picture
    from .bookings import Booking


class Product(BaseModelDB, table=True):
    """Produit du catalogue, éventuellement illustré par une image et rangé dans des catégories."""

    title: str = Field(index=True, max_length=50, description="Titre du produit")
    description: str = Field(default="", description="Description longue")
    price: float = Field(default=0.0, description="Prix unitaire")
    availability: bool = Field(default=True, description="Produit disponible à la réservation ?")

    picture_id: Optional[int] = Field(default=None, foreign_key="picture.id", index=True)

    # Relations ORM
    picture: Optional["Picture"] = Relationship(back_populates="products")
    categories: List["Category"] = Relationship(back_populates="products", link_model=ProductCategoryLink)
    bookings: List["Booking"] = Relationship(back_populates="products", link_model=ProductBookingLink)
