"""
➡️ But : Endpoints images (upload, lecture, mise à jour, suppression).

Deux formats d'entrée acceptés pour POST /new et PUT /{id} :
- multipart/form-data : champ fichier `picture` + champs texte `title`, `slug`
- application/json : {"fileName", "fileData" (base64), "title", "slug"}

Le type réel du fichier est toujours détecté à partir de son contenu.
Le corps est lu en async ; le service (disque + SQLite) tourne dans le threadpool.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response, status
from fastapi.responses import FileResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from catalog.api.v1.dependencies import get_current_user, get_picture_service, pagination
from catalog.db.models.users import User
from catalog.features.pictures.schemas import (
    PictureBase64In,
    PictureListOut,
    PictureOut,
    PictureUpdateBase64In,
)
from catalog.features.pictures.services import PictureService

router = APIRouter(
    prefix="/pictures",
    tags=["pictures"],
    responses={404: {"description": "Not Found"}},
)

_UPLOAD_BODY = {
    "requestBody": {
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "picture": {"type": "string", "format": "binary"},
                        "title": {"type": "string", "maxLength": 32},
                        "slug": {"type": "string", "maxLength": 32, "pattern": "^[a-z0-9-]+$"},
                    },
                }
            },
            "application/json": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "fileName": {"type": "string", "example": "chaise.png"},
                        "fileData": {"type": "string", "description": "Contenu base64 (préfixe data: accepté)"},
                        "title": {"type": "string", "maxLength": 32},
                        "slug": {"type": "string", "maxLength": 32},
                    },
                }
            },
        }
    }
}


# -------- Helpers --------

def _is_multipart(request: Request) -> bool:
    return request.headers.get("content-type", "").lower().startswith("multipart/form-data")


def _text_field(value) -> Optional[str]:
    return value if isinstance(value, str) and value != "" else None


async def _read_multipart(request: Request, *, file_required: bool, max_bytes: int) -> dict:
    form = await request.form()
    upload = form.get("picture")
    fields = {"title": _text_field(form.get("title")), "slug": _text_field(form.get("slug"))}

    if not isinstance(upload, UploadFile):
        if file_required:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Aucun fichier 'picture' fourni")
        return fields

    try:
        # au plus max_bytes + 1 octets : un fichier trop gros est refusé sans être chargé en entier
        raw = await upload.read(max_bytes + 1)
    finally:
        await upload.close()
    fields.update(raw=raw, filename=upload.filename, content_type=upload.content_type)
    return fields


async def _read_json(request: Request, model: type[BaseModel]):
    try:
        data = await request.json()
        return model.model_validate(data)
    except (ValueError, ValidationError):
        # json.JSONDecodeError est une sous-classe de ValueError
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON data")


# -----------------------------
# Lecture
# -----------------------------
@router.get(
    "",
    summary="Lister les images",
    description="Métadonnées uniquement ; le fichier est servi par GET /pictures/{id}.",
    response_model=PictureListOut,
)
def list_pictures(p=Depends(pagination), svc: PictureService = Depends(get_picture_service)):
    data = svc.list(**p)
    data["items"] = [PictureOut.model_validate(i) for i in data["items"]]
    return data


@router.get(
    "/{picture_id}",
    summary="Télécharger une image",
    response_class=FileResponse,
    responses={200: {"content": {"image/*": {}}}, 404: {"description": "Image ou fichier introuvable"}},
)
def get_picture_file(
    picture_id: int = Path(..., ge=1),
    svc: PictureService = Depends(get_picture_service),
):
    path, picture = svc.file_for(picture_id)
    return FileResponse(path, media_type=picture.mime_type)


# -----------------------------
# Upload (création)
# -----------------------------
@router.post(
    "/new",
    summary="Uploader une image (multipart ou JSON base64)",
    status_code=status.HTTP_201_CREATED,
    response_model=PictureOut,
    responses={
        400: {"description": "Fichier refusé, slug invalide ou JSON invalide"},
        401: {"description": "Non authentifié"},
    },
    openapi_extra=_UPLOAD_BODY,
)
async def create_picture(
    request: Request,
    response: Response,
    user: User = Depends(get_current_user),
    svc: PictureService = Depends(get_picture_service),
):
    if _is_multipart(request):
        fields = await _read_multipart(request, file_required=True, max_bytes=svc.max_bytes)
        picture = await run_in_threadpool(svc.create_from_upload, **fields)
    else:
        payload = await _read_json(request, PictureBase64In)
        picture = await run_in_threadpool(svc.create_from_base64, payload)
    response.headers["Location"] = f"/api/pictures/{picture.id}"
    return picture


# -----------------------------
# Mise à jour
# -----------------------------
@router.put(
    "/{picture_id}",
    summary="Mettre à jour une image",
    description="Fichier optionnel ; un nouveau titre sans slug régénère le slug.",
    response_model=PictureOut,
    responses={400: {"description": "Aucune modification ou entrée invalide"}, 401: {"description": "Non authentifié"}},
    openapi_extra=_UPLOAD_BODY,
)
async def update_picture(
    request: Request,
    picture_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: PictureService = Depends(get_picture_service),
):
    if _is_multipart(request):
        fields = await _read_multipart(request, file_required=False, max_bytes=svc.max_bytes)
        return await run_in_threadpool(svc.update_from_upload, picture_id, **fields)
    payload = await _read_json(request, PictureUpdateBase64In)
    return await run_in_threadpool(svc.update_from_base64, picture_id, payload)


# -----------------------------
# Suppression
# -----------------------------
@router.delete(
    "/{picture_id}",
    summary="Supprimer une image (fichier + ligne DB)",
    description="Les produits qui utilisaient l'image sont détachés.",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={204: {"description": "Supprimée"}, 401: {"description": "Non authentifié"}},
)
def delete_picture(
    picture_id: int = Path(..., ge=1),
    user: User = Depends(get_current_user),
    svc: PictureService = Depends(get_picture_service),
):
    svc.delete(picture_id)
    return None
