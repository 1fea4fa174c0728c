"""
➡️ But : Gestion des comptes par l'administrateur.

Les routes ne contiennent ni SQL ni logique métier ; toutes exigent ROLE_ADMIN.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, status

from catalog.api.v1.dependencies import get_user_service, pagination, require_admin
from catalog.db.models.users import User
from catalog.features.users.schemas import UserListOut, UserOut
from catalog.features.users.services import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={403: {"description": "Admin only"}, 404: {"description": "Not Found"}},
)

@router.get(
    "",
    summary="Lister les utilisateurs",
    description="Retourne une liste paginée des comptes.",
    response_model=UserListOut,
    responses={
        200: {
            "description": "Liste paginée",
            "content": {
                "application/json": {
                    "example": {
                        "items": [
                            {
                                "id": 1,
                                "email": "admin@example.com",
                                "first_name": "Alice",
                                "last_name": "Martin",
                                "roles": ["ROLE_ADMIN", "ROLE_USER"],
                                "created_at": "2025-01-01T10:00:00Z",
                                "updated_at": None,
                            },
                        ],
                        "total": 1
                    }
                }
            },
        }
    },
)
def list_users(
    p=Depends(pagination),
    admin: User = Depends(require_admin),
    svc: UserService = Depends(get_user_service),
):
    data = svc.list(**p)
    # rôles effectifs (ROLE_USER implicite) plutôt que la colonne brute
    data["items"] = [UserOut.from_user(u) for u in data["items"]]
    return data

@router.delete(
    "/{user_id}",
    summary="Supprimer un utilisateur",
    description="Supprime aussi ses réservations.",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_user(
    user_id: int = Path(..., ge=1),
    admin: User = Depends(require_admin),
    svc: UserService = Depends(get_user_service),
):
    if user_id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Impossible de supprimer son propre compte")
    svc.delete(user_id)
    return None
