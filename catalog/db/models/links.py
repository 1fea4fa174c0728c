"""Tables d'association many-to-many (Product ↔ Category, Product ↔ Booking)."""

from typing import Optional
from sqlmodel import SQLModel, Field


class ProductCategoryLink(SQLModel, table=True):
    __tablename__ = "product_category"

    product_id: Optional[int] = Field(
        default=None, foreign_key="product.id", primary_key=True, ondelete="CASCADE"
    )
    category_id: Optional[int] = Field(
        default=None, foreign_key="category.id", primary_key=True, ondelete="CASCADE"
    )


class ProductBookingLink(SQLModel, table=True):
    __tablename__ = "product_booking"

    product_id: Optional[int] = Field(
        default=None, foreign_key="product.id", primary_key=True, ondelete="CASCADE"
    )
    booking_id: Optional[int] = Field(
        default=None, foreign_key="booking.id", primary_key=True, ondelete="CASCADE"
    )
