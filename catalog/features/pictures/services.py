"""
Service Pictures : orchestre validation d'upload + stockage disque + repository.

Ordre des opérations pour ne jamais laisser d'état incohérent :
  1. validation (extension, MIME détecté, taille, slug) sans rien écrire,
  2. écriture du fichier (temp + rename),
  3. commit en base ; en cas d'échec le fichier écrit est supprimé.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from catalog.db.models.base import utc_now
from catalog.db.models.pictures import Picture
from catalog.db.repositories.pictures import PictureRepository
from catalog.db.repositories.products import ProductRepository
from catalog.features.pictures.schemas import PictureBase64In, PictureUpdateBase64In
from catalog.utils.slugs import resolve_slug, slugify
from catalog.utils.uploads import (
    DEFAULT_MAX_BYTES,
    UploadError,
    build_filename,
    check_declared,
    decode_base64,
    remove_file,
    resolve_within,
    store_bytes,
    validate_bytes,
)

logger = logging.getLogger(__name__)

TITLE_MAX_LEN = 32


@dataclass(frozen=True)
class PreparedFile:
    filename: str
    raw: bytes
    mime: str
    size: int
    sha256: str


def _http_error(e: UploadError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=str(e))


class PictureService:
    def __init__(
        self,
        *,
        repo: PictureRepository,
        product_repo: ProductRepository,
        upload_dir: Path,
        url_prefix: str = "/uploads/pictures",
        max_bytes: int = DEFAULT_MAX_BYTES,
    ):
        self.repo = repo
        self.products = product_repo
        self.upload_dir = Path(upload_dir)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_bytes = max_bytes

    # -------- Helpers --------

    def _public_url(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    @staticmethod
    def _check_title(title: Optional[str]) -> Optional[str]:
        if title is None:
            return None
        title = title.strip()
        if len(title) > TITLE_MAX_LEN:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Titre trop long (max {TITLE_MAX_LEN} caractères)",
            )
        return title or None

    @staticmethod
    def _slug_or_400(slug: Optional[str], *fallbacks: Optional[str]) -> str:
        try:
            return resolve_slug(slug, *fallbacks)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    def _prepare(self, raw: bytes, *, original_name: Optional[str], content_type: Optional[str]) -> PreparedFile:
        try:
            check_declared(original_name, content_type)
            mime, ext, size, sha = validate_bytes(raw, max_bytes=self.max_bytes)
        except UploadError as e:
            logger.warning("Upload refusé (%s): %s", original_name, e)
            raise _http_error(e)
        return PreparedFile(
            filename=build_filename(original_name, ext),
            raw=raw,
            mime=mime,
            size=size,
            sha256=sha,
        )

    def _decode(self, data: str) -> bytes:
        try:
            return decode_base64(data, max_bytes=self.max_bytes)
        except UploadError as e:
            logger.warning("Upload base64 refusé: %s", e)
            raise _http_error(e)

    def _store(self, prepared: PreparedFile) -> None:
        try:
            store_bytes(self.upload_dir, prepared.filename, prepared.raw)
        except UploadError as e:
            logger.error("Stockage impossible pour %s: %s", prepared.filename, e)
            raise _http_error(e)

    def _discard(self, filename: Optional[str]) -> None:
        try:
            remove_file(self.upload_dir, filename)
        except UploadError as e:
            logger.error("Suppression impossible pour %s: %s", filename, e)

    def _commit_or_discard(self, picture: Picture, new_file: Optional[str]) -> Picture:
        try:
            return self.repo.save(picture)
        except SQLAlchemyError as e:
            self.repo.rollback()
            self._discard(new_file)
            logger.error("Échec d'enregistrement de l'image: %s", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Problème lors de l'enregistrement de l'image.",
            )

    # -------- Reads --------

    def list(self, offset: int, limit: int):
        items = self.repo.list(offset, limit)
        total = self.repo.count()
        return {"items": items, "total": total}

    def get(self, picture_id: int) -> Picture:
        picture = self.repo.get(picture_id)
        if not picture:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image introuvable")
        return picture

    def resolve_file(self, filename: str) -> Path:
        """Chemin disque d'un fichier public ; 403 si hors du dossier, 404 si absent."""
        try:
            path = resolve_within(self.upload_dir, filename)
        except UploadError as e:
            raise _http_error(e)
        if not path.is_file():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fichier introuvable")
        return path

    def file_for(self, picture_id: int) -> tuple[Path, Picture]:
        picture = self.get(picture_id)
        return self.resolve_file(picture.image_path), picture

    # -------- Writes --------

    def create_from_upload(
        self,
        *,
        raw: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        title: Optional[str] = None,
        slug: Optional[str] = None,
    ) -> Picture:
        title = self._check_title(title)
        slug = self._slug_or_400(slug, title, Path(filename or "").stem)
        prepared = self._prepare(raw, original_name=filename, content_type=content_type)
        return self._create(prepared, title=title, slug=slug)

    def create_from_base64(self, payload: PictureBase64In) -> Picture:
        title = self._check_title(payload.title)
        slug = self._slug_or_400(payload.slug, title, Path(payload.file_name).stem)
        raw = self._decode(payload.file_data)
        prepared = self._prepare(raw, original_name=payload.file_name, content_type=None)
        return self._create(prepared, title=title, slug=slug)

    def _create(self, prepared: PreparedFile, *, title: Optional[str], slug: str) -> Picture:
        self._store(prepared)
        picture = Picture(
            image_path=prepared.filename,
            file_path=self._public_url(prepared.filename),
            title=title,
            slug=slug,
            mime_type=prepared.mime,
            bytes=prepared.size,
            sha256=prepared.sha256,
        )
        picture = self._commit_or_discard(picture, prepared.filename)
        logger.info("Image %s créée (%s)", picture.id, picture.image_path)
        return picture

    def update_from_upload(
        self,
        picture_id: int,
        *,
        raw: Optional[bytes] = None,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
        title: Optional[str] = None,
        slug: Optional[str] = None,
    ) -> Picture:
        picture = self.get(picture_id)
        prepared = None
        if raw is not None:
            prepared = self._prepare(raw, original_name=filename, content_type=content_type)
        return self._update(picture, prepared, title=title, slug=slug)

    def update_from_base64(self, picture_id: int, payload: PictureUpdateBase64In) -> Picture:
        picture = self.get(picture_id)
        if (payload.file_data is None) != (payload.file_name is None):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="fileName et fileData doivent être fournis ensemble",
            )
        prepared = None
        if payload.file_data is not None:
            raw = self._decode(payload.file_data)
            prepared = self._prepare(raw, original_name=payload.file_name, content_type=None)
        return self._update(picture, prepared, title=payload.title, slug=payload.slug)

    def _update(
        self,
        picture: Picture,
        prepared: Optional[PreparedFile],
        *,
        title: Optional[str],
        slug: Optional[str],
    ) -> Picture:
        if prepared is None and title is None and slug is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Aucune modification fournie")

        if title is not None:
            picture.title = self._check_title(title)
        if slug is not None or (title is not None and slugify(title)):
            # un nouveau titre sans slug explicite régénère le slug
            picture.slug = self._slug_or_400(slug, title)

        old_file = None
        if prepared is not None:
            self._store(prepared)
            old_file = picture.image_path
            picture.image_path = prepared.filename
            picture.file_path = self._public_url(prepared.filename)
            picture.mime_type = prepared.mime
            picture.bytes = prepared.size
            picture.sha256 = prepared.sha256

        picture.updated_at = utc_now()
        picture = self._commit_or_discard(picture, prepared.filename if prepared else None)
        if old_file:
            self._discard(old_file)
        return picture

    def delete(self, picture_id: int) -> None:
        """Détache l'image de tous les produits, supprime la ligne puis le fichier."""
        picture = self.get(picture_id)
        filename = picture.image_path
        for product in self.products.list_by_picture(picture.id):
            product.picture_id = None
            product.updated_at = utc_now()
            self.products.save(product, commit=False)
        self.repo.delete(picture)
        self._discard(filename)
        logger.info("Image %s supprimée (%s)", picture_id, filename)
