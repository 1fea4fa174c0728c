"""
➡️ But : Centraliser les dépendances réutilisables des routes.

Exemples :

get_product_service() : crée un ProductService à partir d'une session DB.

get_current_user() / require_admin() : authentification et contrôle de rôle.

get_upload_dir() : dossier d'upload injecté (surchargé dans les tests).

pagination() : paramètres communs page et size.
"""

from pathlib import Path

from fastapi import Depends, HTTPException, Query, status, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from catalog.core.config import settings, jwt_settings
from catalog.db.session import get_session
from catalog.db.models.users import User

from catalog.db.repositories.users import UserRepository
from catalog.db.repositories.categories import CategoryRepository
from catalog.db.repositories.pictures import PictureRepository
from catalog.db.repositories.products import ProductRepository
from catalog.db.repositories.bookings import BookingRepository

from catalog.features.authentication.services import AuthService
from catalog.features.users.services import UserService
from catalog.features.categories.services import CategoryService
from catalog.features.pictures.services import PictureService
from catalog.features.products.services import ProductService
from catalog.features.bookings.services import BookingService


def pagination(
    page: int = Query(1, ge=1, description="Numéro de page", examples=[1]),
    size: int = Query(20, ge=1, le=100, description="Taille de page", examples=[20]),
):
    offset = (page - 1) * size
    return {"offset": offset, "limit": size}


# -----------------------------
# Configuration injectée
# -----------------------------
def get_upload_dir() -> Path:
    return Path(settings.UPLOAD_DIR)


# -----------------------------
# Repositories
# -----------------------------
def get_user_repository(session: Session = Depends(get_session)) -> UserRepository:
    return UserRepository(session)

def get_category_repository(session: Session = Depends(get_session)) -> CategoryRepository:
    return CategoryRepository(session)

def get_picture_repository(session: Session = Depends(get_session)) -> PictureRepository:
    return PictureRepository(session)

def get_product_repository(session: Session = Depends(get_session)) -> ProductRepository:
    return ProductRepository(session)

def get_booking_repository(session: Session = Depends(get_session)) -> BookingRepository:
    return BookingRepository(session)


# -----------------------------
# Services
# -----------------------------
def get_auth_service(user_repo: UserRepository = Depends(get_user_repository)) -> AuthService:
    return AuthService(user_repo=user_repo, jwt_settings=jwt_settings)

def get_user_service(user_repo: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(user_repo)

def get_category_service(repo: CategoryRepository = Depends(get_category_repository)) -> CategoryService:
    return CategoryService(repo)

def get_picture_service(
    repo: PictureRepository = Depends(get_picture_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
    upload_dir: Path = Depends(get_upload_dir),
) -> PictureService:
    return PictureService(
        repo=repo,
        product_repo=product_repo,
        upload_dir=upload_dir,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        max_bytes=settings.MAX_UPLOAD_MB * 1024 * 1024,
    )

def get_product_service(
    repo: ProductRepository = Depends(get_product_repository),
    category_repo: CategoryRepository = Depends(get_category_repository),
    picture_repo: PictureRepository = Depends(get_picture_repository),
    booking_repo: BookingRepository = Depends(get_booking_repository),
) -> ProductService:
    return ProductService(
        repo=repo,
        category_repo=category_repo,
        picture_repo=picture_repo,
        booking_repo=booking_repo,
    )

def get_booking_service(
    repo: BookingRepository = Depends(get_booking_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
) -> BookingService:
    return BookingService(repo=repo, product_repo=product_repo)


# -----------------------------
# Authentication data
# -----------------------------
bearer_scheme = HTTPBearer(auto_error=False)

def get_access_token_from_bearer(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
) -> str:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    return credentials.credentials


def get_current_user(
    access_token: str = Depends(get_access_token_from_bearer),
    auth_svc: AuthService = Depends(get_auth_service),
) -> User:
    return auth_svc.get_current_user(access_token=access_token)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user
