"""
➡️ But : assembler toutes les pièces du puzzle.

Crée l’instance FastAPI (app).

Configure :

logging (niveau issu de settings.LOG_LEVEL)

CORS (autorisations de qui peut appeler ces API)

titre, version, tags

schéma OpenAPI personnalisé

Inclut les routers sous /api (ex : /api/products) et les fichiers uploadés
sous /uploads/pictures.

Initialise la base SQLite au démarrage (@app.on_event("startup")).

🔹 Point unique d’exécution : uvicorn catalog.main:app --reload.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from catalog.core.config import settings
from catalog.core.logging_config import configure_logging
from catalog.core.openapi import custom_openapi
from catalog.db.session import init_db

from catalog.api.v1.routers import (
    authentication,
    bookings,
    categories,
    pictures,
    products,
    uploads,
    users,
)

import uvicorn

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    openapi_tags=[
        {"name": "products", "description": "Catalogue de produits"},
        {"name": "categories", "description": "Catégories de produits"},
        {"name": "bookings", "description": "Réservations (authentification requise)"},
        {"name": "pictures", "description": "Upload et lecture des images"},
        {"name": "auth", "description": "Opérations liées à l'authentification"},
        {"name": "users", "description": "Gestion des comptes (admin)"},
        {"name": "uploads", "description": "Fichiers publics"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS, allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)

# Routers
app.include_router(products.router, prefix="/api")
app.include_router(categories.router, prefix="/api")
app.include_router(bookings.router, prefix="/api")
app.include_router(pictures.router, prefix="/api")
app.include_router(authentication.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(uploads.router)

app.openapi = lambda: custom_openapi(app)

# Démarrage
@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("%s démarré (env=%s)", settings.APP_NAME, settings.ENV)

if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8080, reload=(settings.ENV == "dev")) # http://localhost:8080
