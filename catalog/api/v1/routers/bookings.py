from fastapi import APIRouter, Depends, Path, status

from catalog.api.v1.dependencies import get_booking_service, get_current_user, pagination
from catalog.db.models.users import User
from catalog.features.bookings.schemas import (
    BookingCreateIn,
    BookingListOut,
    BookingOut,
    BookingUpdateIn,
)
from catalog.features.bookings.services import BookingService

router = APIRouter(
    prefix="/booking",
    tags=["bookings"],
    responses={
        401: {"description": "Non authentifié"},
        403: {"description": "Réservation d'un autre utilisateur"},
        404: {"description": "Not Found"},
    },
)


# -----------------------------
# Lecture (propriétaire ou admin)
# -----------------------------
@router.get(
    "",
    summary="Lister mes réservations",
    description="Un administrateur voit toutes les réservations.",
    response_model=BookingListOut,
)
def list_bookings(
    p=Depends(pagination),
    user: User = Depends(get_current_user),
    svc: BookingService = Depends(get_booking_service),
):
    data = svc.list(user, **p)
    data["items"] = [BookingOut.model_validate(i) for i in data["items"]]
    return data


@router.get(
    "/{booking_id}",
    summary="Récupérer une réservation",
    response_model=BookingOut,
)
def get_booking(
    booking_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: BookingService = Depends(get_booking_service),
):
    return svc.get(booking_id, user)


# -----------------------------
# Écriture
# -----------------------------
@router.post(
    "",
    summary="Créer une réservation",
    description="Le statut (Disponible / Indisponible) est calculé à partir des produits réservés.",
    status_code=status.HTTP_201_CREATED,
    response_model=BookingOut,
)
def create_booking(
    payload: BookingCreateIn,
    user: User = Depends(get_current_user),
    svc: BookingService = Depends(get_booking_service),
):
    return svc.create(payload, user)


@router.put(
    "/{booking_id}",
    summary="Modifier une réservation",
    response_model=BookingOut,
)
def update_booking(
    payload: BookingUpdateIn,
    booking_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: BookingService = Depends(get_booking_service),
):
    return svc.update(booking_id, payload, user)


@router.delete(
    "/{booking_id}",
    summary="Supprimer une réservation",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_booking(
    booking_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: BookingService = Depends(get_booking_service),
):
    svc.delete(booking_id, user)
    return None


# -----------------------------
# Produits d'une réservation
# -----------------------------
@router.post(
    "/{booking_id}/products/{product_id}",
    summary="Ajouter un produit à une réservation",
    response_model=BookingOut,
)
def add_booking_product(
    booking_id: int = Path(..., ge=1),
    product_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: BookingService = Depends(get_booking_service),
):
    return svc.add_product(booking_id, product_id, user)


@router.delete(
    "/{booking_id}/products/{product_id}",
    summary="Retirer un produit d'une réservation",
    response_model=BookingOut,
)
def remove_booking_product(
    booking_id: int = Path(..., ge=1),
    product_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: BookingService = Depends(get_booking_service),
):
    return svc.remove_product(booking_id, product_id, user)
