from typing import List

from fastapi import HTTPException, status

from catalog.db.models.base import utc_now
from catalog.db.models.bookings import Booking
from catalog.db.models.products import Product
from catalog.db.models.users import User
from catalog.db.repositories.bookings import BookingRepository
from catalog.db.repositories.products import ProductRepository
from catalog.features.bookings.schemas import BookingCreateIn, BookingUpdateIn
from catalog.features.bookings.status import derive_status, refresh_status


class BookingService:
    """
    Réservations :
    - Un utilisateur ne voit / modifie que ses réservations, un admin voit tout.
    - Le statut est recalculé dans la même transaction que chaque modification des produits.
    """

    def __init__(self, *, repo: BookingRepository, product_repo: ProductRepository):
        self.repo = repo
        self.products = product_repo

    # -------- Helpers --------

    def _load_products(self, ids: List[int]) -> List[Product]:
        found = self.products.get_many(ids)
        known = {p.id for p in found}
        for product_id in ids:
            if product_id not in known:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Produit ID {product_id} introuvable.",
                )
        return found

    def _get_product(self, product_id: int) -> Product:
        product = self.products.get(product_id)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Produit introuvable.")
        return product

    @staticmethod
    def _assert_can_access(booking: Booking, user: User) -> None:
        if user.is_admin or booking.user_id == user.id:
            return
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    def _touch_and_save(self, booking: Booking) -> Booking:
        refresh_status(booking)
        booking.updated_at = utc_now()
        return self.repo.save(booking)

    # -------- Reads --------

    def list(self, user: User, *, offset: int, limit: int):
        if user.is_admin:
            return {"items": self.repo.list(offset, limit), "total": self.repo.count()}
        return {
            "items": self.repo.list_for_user(user.id, offset, limit),
            "total": self.repo.count_for_user(user.id),
        }

    def get(self, booking_id: int, user: User) -> Booking:
        booking = self.repo.get(booking_id)
        if not booking:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Réservation introuvable.")
        self._assert_can_access(booking, user)
        return booking

    # -------- Writes --------

    def create(self, payload: BookingCreateIn, user: User) -> Booking:
        products = self._load_products(payload.product)
        booking = Booking(
            quantity=payload.quantity,
            user_id=user.id,
            status=derive_status(products),
        )
        booking.products = products
        return self.repo.save(booking)

    def update(self, booking_id: int, payload: BookingUpdateIn, user: User) -> Booking:
        booking = self.get(booking_id, user)
        if payload.quantity is not None:
            booking.quantity = payload.quantity
        if payload.product is not None:
            booking.products = self._load_products(payload.product)
        return self._touch_and_save(booking)

    def add_product(self, booking_id: int, product_id: int, user: User) -> Booking:
        booking = self.get(booking_id, user)
        product = self._get_product(product_id)
        if product not in booking.products:
            booking.products.append(product)
        return self._touch_and_save(booking)

    def remove_product(self, booking_id: int, product_id: int, user: User) -> Booking:
        booking = self.get(booking_id, user)
        product = self._get_product(product_id)
        if product in booking.products:
            booking.products.remove(product)
        return self._touch_and_save(booking)

    def delete(self, booking_id: int, user: User) -> None:
        booking = self.get(booking_id, user)
        self.repo.delete(booking)
