"""
Logique métier des produits : existence des catégories / images référencées,
et recalcul du statut des réservations quand la disponibilité change.
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, status

from catalog.db.models.base import utc_now
from catalog.db.models.categories import Category
from catalog.db.models.pictures import Picture
from catalog.db.models.products import Product
from catalog.db.repositories.bookings import BookingRepository
from catalog.db.repositories.categories import CategoryRepository
from catalog.db.repositories.pictures import PictureRepository
from catalog.db.repositories.products import ProductRepository
from catalog.features.bookings.status import refresh_status
from catalog.features.products.schemas import ProductCreateIn, ProductUpdateIn

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(
        self,
        *,
        repo: ProductRepository,
        category_repo: CategoryRepository,
        picture_repo: PictureRepository,
        booking_repo: BookingRepository,
    ):
        self.repo = repo
        self.categories = category_repo
        self.pictures = picture_repo
        self.bookings = booking_repo

    # -------- Helpers --------

    def _load_categories(self, ids: List[int]) -> List[Category]:
        found = self.categories.get_many(ids)
        known = {c.id for c in found}
        for category_id in ids:
            if category_id not in known:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Catégorie ID {category_id} introuvable.",
                )
        return found

    def _load_picture(self, picture_id: Optional[int]) -> Optional[Picture]:
        if picture_id is None:
            return None
        picture = self.pictures.get(picture_id)
        if not picture:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Image ID {picture_id} introuvable.",
            )
        return picture

    def _refresh_bookings(self, product: Product) -> None:
        for booking in self.bookings.list_containing_product(product.id):
            if refresh_status(booking):
                booking.updated_at = utc_now()
                self.bookings.save(booking, commit=False)
                logger.info("Réservation %s -> %s (produit %s)", booking.id, booking.status, product.id)

    # -------- Reads --------

    def list(self, offset: int, limit: int):
        items = self.repo.list(offset, limit)
        total = self.repo.count()
        return {"items": items, "total": total}

    def get(self, product_id: int) -> Product:
        product = self.repo.get(product_id)
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Produit introuvable.")
        return product

    # -------- Writes --------

    def create(self, payload: ProductCreateIn) -> Product:
        categories = self._load_categories(payload.category)
        picture = self._load_picture(payload.picture)

        product = Product(
            title=payload.title,
            description=payload.description,
            price=payload.price,
            availability=payload.availability,
        )
        product.categories = categories
        product.picture = picture
        return self.repo.save(product)

    def update(self, product_id: int, payload: ProductUpdateIn) -> Product:
        product = self.get(product_id)
        changes = payload.model_dump(exclude_unset=True)

        if "category" in changes:
            product.categories = self._load_categories(changes.pop("category") or [])
        if "picture" in changes:
            product.picture = self._load_picture(changes.pop("picture"))

        availability_changed = (
            changes.get("availability") is not None and changes["availability"] != product.availability
        )
        for key, value in changes.items():
            if value is not None:
                setattr(product, key, value)
        product.updated_at = utc_now()

        self.repo.save(product, commit=False)
        if availability_changed:
            self._refresh_bookings(product)
        self.repo.commit()
        self.repo.session.refresh(product)
        return product

    def delete(self, product_id: int) -> None:
        product = self.get(product_id)
        bookings = self.bookings.list_containing_product(product.id)
        self.repo.delete(product, commit=False)
        # le produit supprimé ne compte plus dans le statut des réservations
        for booking in bookings:
            self.bookings.session.refresh(booking, attribute_names=["products"])
            if refresh_status(booking):
                self.bookings.save(booking, commit=False)
        self.repo.commit()
