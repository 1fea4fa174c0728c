"""
Fichiers publics : GET /uploads/pictures/{filename}

Monté hors de /api. Le nom demandé est résolu sous le dossier d'upload
(403 si le chemin en sort, 404 si le fichier n'existe pas).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from catalog.api.v1.dependencies import get_picture_service
from catalog.core.config import settings
from catalog.features.pictures.services import PictureService
from catalog.utils.uploads import detect_mime_and_ext

router = APIRouter(
    prefix=settings.UPLOAD_URL_PREFIX,
    tags=["uploads"],
    responses={403: {"description": "Chemin refusé"}, 404: {"description": "Not Found"}},
)


@router.get(
    "/{filename:path}",
    summary="Servir un fichier uploadé",
    response_class=FileResponse,
)
def serve_upload(filename: str, svc: PictureService = Depends(get_picture_service)):
    path = svc.resolve_file(filename)
    with path.open("rb") as fh:
        mime, _ = detect_mime_and_ext(fh.read(261))
    return FileResponse(path, media_type=mime)
