"""
➡️ But : Définir les endpoints produits.

Les routes ne contiennent ni SQL ni logique métier : elles appellent ProductService
et convertissent les entités vers les schémas de sortie (response_model).
"""

from fastapi import APIRouter, Depends, Path, Response, status

from catalog.api.v1.dependencies import get_product_service, pagination
from catalog.features.products.schemas import (
    ProductCreateIn,
    ProductListOut,
    ProductOut,
    ProductUpdateIn,
)
from catalog.features.products.services import ProductService

router = APIRouter(
    prefix="/products",
    tags=["products"],
    responses={404: {"description": "Not Found"}},
)


@router.get(
    "",
    summary="Lister les produits",
    description="Retourne une liste paginée de produits avec leurs catégories et leur image.",
    response_model=ProductListOut,
)
def list_products(p=Depends(pagination), svc: ProductService = Depends(get_product_service)):
    data = svc.list(**p)
    data["items"] = [ProductOut.model_validate(i) for i in data["items"]]
    return data


@router.post(
    "",
    summary="Créer un produit",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductOut,
    responses={404: {"description": "Catégorie ou image inconnue"}},
)
def create_product(
    payload: ProductCreateIn,
    response: Response,
    svc: ProductService = Depends(get_product_service),
):
    product = svc.create(payload)
    response.headers["Location"] = f"/api/products/{product.id}"
    return product


@router.get(
    "/{product_id}",
    summary="Récupérer un produit",
    response_model=ProductOut,
)
def get_product(
    product_id: int = Path(..., ge=1),
    svc: ProductService = Depends(get_product_service),
):
    return svc.get(product_id)


@router.put(
    "/{product_id}",
    summary="Mettre à jour un produit",
    description=(
        "Seuls les champs fournis sont modifiés. `category` remplace la liste, "
        "`picture: null` détache l'image. Un changement de disponibilité recalcule "
        "le statut des réservations concernées."
    ),
    response_model=ProductOut,
)
def update_product(
    payload: ProductUpdateIn,
    product_id: int = Path(..., ge=1),
    svc: ProductService = Depends(get_product_service),
):
    return svc.update(product_id, payload)


@router.delete(
    "/{product_id}",
    summary="Supprimer un produit",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_product(
    product_id: int = Path(..., ge=1),
    svc: ProductService = Depends(get_product_service),
):
    svc.delete(product_id)
    return None
