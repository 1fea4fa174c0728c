"""Statut d'une réservation, dérivé de la disponibilité de ses produits."""

from typing import Iterable

from catalog.db.models.bookings import Booking, STATUS_AVAILABLE, STATUS_UNAVAILABLE
from catalog.db.models.products import Product


def derive_status(products: Iterable[Product]) -> str:
    """'Indisponible' dès qu'un produit lié est indisponible, sinon 'Disponible' (liste vide comprise)."""
    if any(not product.availability for product in products):
        return STATUS_UNAVAILABLE
    return STATUS_AVAILABLE


def refresh_status(booking: Booking) -> bool:
    """Recalcule le statut en place. Retourne True s'il a changé."""
    status = derive_status(booking.products)
    if booking.status == status:
        return False
    booking.status = status
    return True
