from fastapi import APIRouter, Depends, status

from catalog.api.v1.dependencies import get_auth_service, get_current_user, require_admin
from catalog.db.models.users import User
from catalog.features.authentication.services import AuthService
from catalog.features.authentication.schemas import (
    AccountEditIn,
    AssignRoleIn,
    LoginIn,
    RegistrationIn,
    TokenOut,
)
from catalog.features.users.schemas import UserOut  # pour /account/me & registration

router = APIRouter(
    tags=["auth"],
    responses={404: {"description": "Not Found"}},
)

# -----------------------------
# Registration
# -----------------------------
@router.post(
    "/registration",
    summary="Créer un compte",
    description="`roles` peut contenir ROLE_ADMIN uniquement si aucun administrateur n'existe.",
    status_code=status.HTTP_201_CREATED,
    response_model=UserOut,
    responses={
        400: {"description": "Rôle invalide"},
        403: {"description": "Un compte administrateur existe déjà"},
        409: {"description": "Email déjà utilisé"},
    },
)
def registration(payload: RegistrationIn, svc: AuthService = Depends(get_auth_service)):
    return UserOut.from_user(svc.register(payload))

# -----------------------------
# Login
# -----------------------------
@router.post(
    "/login",
    summary="Se connecter",
    description="Retourne un access token à passer en header `Authorization: Bearer <token>`.",
    response_model=TokenOut,
    responses={401: {"description": "Informations de connexion incorrectes"}},
)
def login(payload: LoginIn, svc: AuthService = Depends(get_auth_service)):
    return svc.login(payload)

# -----------------------------
# Compte courant
# -----------------------------
@router.get(
    "/account/me",
    summary="Mon compte",
    response_model=UserOut,
)
def me(user: User = Depends(get_current_user)):
    return UserOut.from_user(user)


@router.put(
    "/account/edit",
    summary="Modifier mon compte",
    response_model=UserOut,
    responses={409: {"description": "Email déjà utilisé"}},
)
def edit_account(
    payload: AccountEditIn,
    user: User = Depends(get_current_user),
    svc: AuthService = Depends(get_auth_service),
):
    return UserOut.from_user(svc.edit_account(user, payload))

# -----------------------------
# Rôles (admin)
# -----------------------------
@router.put(
    "/assign-role",
    summary="Attribuer des rôles à un utilisateur (admin)",
    description="Remplace les rôles de l'utilisateur. Un seul administrateur peut exister.",
    response_model=UserOut,
    responses={
        400: {"description": "Rôle invalide"},
        403: {"description": "Réservé à l'admin, ou admin déjà présent"},
    },
)
def assign_role(
    payload: AssignRoleIn,
    admin: User = Depends(require_admin),
    svc: AuthService = Depends(get_auth_service),
):
    return UserOut.from_user(svc.assign_roles(payload))
