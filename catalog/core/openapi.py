"""
➡️ But : Compléter le schéma OpenAPI généré par FastAPI avec les conventions de l'API
(pagination, format des erreurs, uploads d'images, authentification).
"""

from fastapi.openapi.utils import get_openapi

from catalog.core.config import settings

CONVENTIONS = [
    "Toutes les heures sont en UTC.",
    "Listes : `{\"items\": [...], \"total\": n}`, pagination par `page` & `size`.",
    "Erreurs : `{\"detail\": \"...\"}`.",
    "Images : multipart (`picture`) ou JSON base64 (`fileName`, `fileData`), "
    f"JPEG / PNG / GIF / WebP, {settings.MAX_UPLOAD_MB} MB max.",
    "Auth : header `Authorization: Bearer <token>` obtenu via `POST /api/login`.",
]


def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema

    description = "API catalogue / réservations.\n\n### Conventions\n" + "".join(
        f"- {line}\n" for line in CONVENTIONS
    )
    app.openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=description,
        routes=app.routes,
        tags=app.openapi_tags,
    )
    return app.openapi_schema
