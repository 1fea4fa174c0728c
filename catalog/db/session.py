"""
➡️ But : Moteur SQLAlchemy et sessions.

SQLite par défaut (clés étrangères activées pour les ON DELETE CASCADE),
autre SGBD via DATABASE_URL. Une session par requête via `get_session`.
"""

import logging
from typing import Dict, Any

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

# Tous les modèles doivent être importés avant create_all
from catalog.db.models.links import ProductCategoryLink, ProductBookingLink
from catalog.db.models.users import User
from catalog.db.models.pictures import Picture
from catalog.db.models.categories import Category
from catalog.db.models.products import Product
from catalog.db.models.bookings import Booking

from catalog.core.config import settings

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite n'applique les ON DELETE CASCADE qu'avec PRAGMA foreign_keys=ON."""
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _build_engine() -> Engine:
    url = settings.DATABASE_URL
    assert url, "DATABASE_URL must be set"

    is_sqlite = url.startswith("sqlite:")

    connect_args: Dict[str, Any] = {}
    if is_sqlite:
        # sessions utilisées depuis le threadpool FastAPI
        connect_args["check_same_thread"] = False

    engine = create_engine(
        url,
        echo=(settings.ENV == "dev"),
        connect_args=connect_args,
        pool_pre_ping=not is_sqlite,
    )
    if is_sqlite:
        enable_sqlite_foreign_keys(engine)
    return engine

engine: Engine = _build_engine()

def init_db() -> None:
    """Crée les tables manquantes (pas de migration)."""
    SQLModel.metadata.create_all(engine)
    logger.info("Tables créées / vérifiées sur %s", engine.url.render_as_string(hide_password=True))


def get_session():
    """Une session par requête, fermée en fin de requête (surchargée dans les tests)."""
    with Session(engine) as session:
        yield session
