import logging
from datetime import datetime
from typing import Callable, List

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError

from catalog.db.models.users import (
    ADMIN_SLOT,
    ROLE_ADMIN,
    ROLE_EMPLOYEE,
    ROLE_MODERATOR,
    ROLE_USER,
    User,
)
from catalog.db.models.base import utc_now
from catalog.db.repositories.users import UserRepository
from catalog.security.password import verify_password, hash_password
from catalog.security.tokens import (
    ACCESS_TOKEN_TYPE,
    JWTError,
    JWTSettings,
    create_access_token,
    decode_token,
)
from catalog.features.authentication.schemas import (
    AccountEditIn,
    AssignRoleIn,
    LoginIn,
    RegistrationIn,
    TokenOut,
)

logger = logging.getLogger(__name__)

ASSIGNABLE_ROLES = {ROLE_USER, ROLE_EMPLOYEE, ROLE_MODERATOR, ROLE_ADMIN}
REGISTRATION_ROLES = {ROLE_USER, ROLE_ADMIN}

ADMIN_EXISTS = "Un compte administrateur existe déjà"


class AuthService:
    """
    Service d'authentification : orchestre le repository User + tokens.
    Ne contient pas d'accès SQL direct et lève des HTTPException propres.

    Unicité de l'admin : vérification rapide (get_admin) puis contrainte UNIQUE
    sur user.admin_slot au commit, qui tranche en cas de requêtes concurrentes.
    """

    def __init__(
        self,
        *,
        user_repo: UserRepository,
        jwt_settings: JWTSettings,
        now_fn: Callable[[], datetime] = utc_now,
    ):
        self.user_repo = user_repo
        self.jwt = jwt_settings
        self.now_fn = now_fn

    # ---------- Helpers rôles ----------
    @staticmethod
    def _clean_roles(roles: List[str], allowed: set) -> List[str]:
        cleaned = list(dict.fromkeys(r.strip().upper() for r in roles if r and r.strip()))
        for role in cleaned:
            if role not in allowed:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Le rôle '{role}' n'est pas valide",
                )
        return cleaned

    def _ensure_no_other_admin(self, user: User) -> None:
        existing = self.user_repo.get_admin()
        if existing and existing.id != user.id:
            logger.warning("Attribution de ROLE_ADMIN refusée pour %s: admin déjà présent", user.email)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ADMIN_EXISTS)

    def _save_or_conflict(self, user: User) -> User:
        wants_admin = user.admin_slot == ADMIN_SLOT
        user_id = user.id
        try:
            return self.user_repo.save(user)
        except IntegrityError:
            # le rollback recharge l'état en base : rôles et email inchangés
            self.user_repo.rollback()
            # course perdue sur admin_slot, ou email déjà pris
            admin = self.user_repo.get_admin() if wants_admin else None
            if admin is not None and admin.id != user_id:
                raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ADMIN_EXISTS)
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email déjà utilisé")

    # ---------- Registration ----------
    def register(self, payload: RegistrationIn) -> User:
        roles = self._clean_roles(payload.roles, REGISTRATION_ROLES)
        if self.user_repo.get_by_email(payload.email):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email déjà utilisé")

        user = User(
            email=payload.email,
            hashed_password=hash_password(payload.password),
            first_name=payload.first_name,
            last_name=payload.last_name,
            roles=[r for r in roles if r != ROLE_USER],
        )
        if ROLE_ADMIN in roles:
            self._ensure_no_other_admin(user)
            user.admin_slot = ADMIN_SLOT

        user = self._save_or_conflict(user)
        logger.info("Compte créé: %s (rôles=%s)", user.email, user.get_roles())
        return user

    # ---------- Login ----------
    def login(self, payload: LoginIn) -> TokenOut:
        user = self.user_repo.get_by_email(payload.email)
        if not user or not verify_password(payload.password, user.hashed_password):
            # Ne pas révéler si l'utilisateur existe
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Informations de connexion incorrectes",
            )
        roles = user.get_roles()
        token = create_access_token(user_id=user.id, email=user.email, roles=roles, settings=self.jwt)
        return TokenOut(
            user=user.email,
            access_token=token,
            token_type="bearer",
            expires_in=self.jwt.access_ttl_seconds,
            roles=roles,
        )

    # ---------- Current user depuis access token ----------
    def get_current_user(self, *, access_token: str) -> User:
        try:
            decoded = decode_token(access_token, self.jwt)
        except JWTError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

        if decoded.get("typ") != ACCESS_TOKEN_TYPE or not decoded.get("sub"):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type")

        user = self.user_repo.get(int(decoded["sub"]))
        if not user:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
        return user

    # ---------- Edition du compte courant ----------
    def edit_account(self, user: User, payload: AccountEditIn) -> User:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in changes and changes["email"] != user.email:
            if self.user_repo.get_by_email(changes["email"]):
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email déjà utilisé")
        if "password" in changes:
            changes["hashed_password"] = hash_password(changes.pop("password"))
        for key, value in changes.items():
            setattr(user, key, value)
        user.updated_at = self.now_fn()
        return self._save_or_conflict(user)

    # ---------- Attribution de rôles (admin) ----------
    def assign_roles(self, payload: AssignRoleIn) -> User:
        roles = self._clean_roles(payload.roles, ASSIGNABLE_ROLES)
        user = self.user_repo.get_by_email(payload.email)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Utilisateur non trouvé")

        if ROLE_ADMIN in roles:
            self._ensure_no_other_admin(user)
            user.admin_slot = ADMIN_SLOT
        else:
            user.admin_slot = None

        user.roles = [r for r in roles if r != ROLE_USER]
        user.updated_at = self.now_fn()
        user = self._save_or_conflict(user)
        logger.info("Rôles de %s mis à jour: %s", user.email, user.get_roles())
        return user
