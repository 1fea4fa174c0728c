from typing import List, Sequence
from sqlmodel import select, func

from catalog.db.repositories.base import BaseRepository
from catalog.db.models.bookings import Booking
from catalog.db.models.links import ProductBookingLink

class BookingRepository(BaseRepository[Booking]):
    model = Booking

    def list_for_user(self, user_id: int, offset: int = 0, limit: int = 100) -> Sequence[Booking]:
        statement = (
            select(self.model)
            .where(self.model.user_id == user_id)
            .order_by(self.model.id)
            .offset(offset)
            .limit(limit)
        )
        return self.session.exec(statement).all()

    def count_for_user(self, user_id: int) -> int:
        return self.session.exec(
            select(func.count(self.model.id)).where(self.model.user_id == user_id)
        ).one()

    def list_containing_product(self, product_id: int) -> List[Booking]:
        """Réservations liées à un produit (via la table product_booking)."""
        statement = (
            select(self.model)
            .join(ProductBookingLink, ProductBookingLink.booking_id == self.model.id)
            .where(ProductBookingLink.product_id == product_id)
        )
        return list(self.session.exec(statement).all())
