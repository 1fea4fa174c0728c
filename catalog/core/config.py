"""
➡️ But : Paramètres de l'API catalogue, lus depuis l'environnement ou `.env`.

DB (SQLITE_PATH ou DATABASE_URL), JWT, dossier et taille max des uploads, CORS.
Le dossier d'upload n'est lu qu'au niveau des dépendances FastAPI
(`get_upload_dir`), jamais directement par les services.
"""

from datetime import timedelta
from typing import List, Optional

from pydantic_settings import BaseSettings
from catalog.security.tokens import JWTSettings


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "Catalog-Booking-API"
    ENV: str = "dev"  # dev | prod | test
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # -----------------------------
    # DB
    # -----------------------------
    SQLITE_PATH: str = "catalog.db"
    # Si tu veux forcer une URL différente (ex: MySQL), définis DATABASE_URL dans l'env.
    DATABASE_URL: Optional[str] = None

    # -----------------------------
    # JWT / Auth
    # -----------------------------
    JWT_SECRET_KEY: str = "CHANGE_ME"     # ⚠️ change en prod
    JWT_ISSUER: str = "catalog-api"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TTL_MINUTES: int = 60

    # -----------------------------
    # Uploads (images produits)
    # -----------------------------
    UPLOAD_DIR: str = "public/uploads/pictures"
    UPLOAD_URL_PREFIX: str = "/uploads/pictures"
    MAX_UPLOAD_MB: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    # -----------------------------
    # Post-process values
    # -----------------------------
    def model_post_init(self, __context):
        if not self.DATABASE_URL:
            object.__setattr__(self, "DATABASE_URL", f"sqlite:///{self.SQLITE_PATH}")

        # "/uploads/pictures/" -> "/uploads/pictures"
        object.__setattr__(self, "UPLOAD_URL_PREFIX", "/" + self.UPLOAD_URL_PREFIX.strip("/"))


# Instance globale importable partout
settings = Settings()

# Objet JWT prêt à l'emploi pour les services
jwt_settings = JWTSettings(
    secret=settings.JWT_SECRET_KEY,
    issuer=settings.JWT_ISSUER,
    algorithm=settings.JWT_ALGORITHM,
    access_ttl=timedelta(minutes=settings.ACCESS_TTL_MINUTES),
)
