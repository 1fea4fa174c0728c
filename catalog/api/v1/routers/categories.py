from fastapi import APIRouter, Depends, Path, status

from catalog.api.v1.dependencies import get_category_service, pagination
from catalog.features.categories.schemas import (
    CategoryCreateIn,
    CategoryListOut,
    CategoryOut,
    CategoryUpdateIn,
)
from catalog.features.categories.services import CategoryService

router = APIRouter(
    prefix="/category",
    tags=["categories"],
    responses={404: {"description": "Not Found"}},
)


@router.get(
    "",
    summary="Lister les catégories",
    response_model=CategoryListOut,
)
def list_categories(p=Depends(pagination), svc: CategoryService = Depends(get_category_service)):
    data = svc.list(**p)
    data["items"] = [CategoryOut.model_validate(i) for i in data["items"]]
    return data


@router.post(
    "",
    summary="Créer une catégorie",
    status_code=status.HTTP_201_CREATED,
    response_model=CategoryOut,
    responses={409: {"description": "Nom déjà utilisé"}},
)
def create_category(payload: CategoryCreateIn, svc: CategoryService = Depends(get_category_service)):
    return svc.create(payload)


@router.get(
    "/{category_id}",
    summary="Récupérer une catégorie",
    response_model=CategoryOut,
)
def get_category(
    category_id: int = Path(..., ge=1),
    svc: CategoryService = Depends(get_category_service),
):
    return svc.get(category_id)


@router.put(
    "/{category_id}",
    summary="Renommer une catégorie",
    response_model=CategoryOut,
    responses={409: {"description": "Nom déjà utilisé"}},
)
def update_category(
    payload: CategoryUpdateIn,
    category_id: int = Path(..., ge=1),
    svc: CategoryService = Depends(get_category_service),
):
    return svc.update(category_id, payload)


@router.delete(
    "/{category_id}",
    summary="Supprimer une catégorie",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_category(
    category_id: int = Path(..., ge=1),
    svc: CategoryService = Depends(get_category_service),
):
    svc.delete(category_id)
    return None
