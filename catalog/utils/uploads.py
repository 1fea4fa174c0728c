"""
Validation et stockage des images uploadées (multipart ou JSON base64).

Tout ce qui touche au disque passe par `resolve_within` : aucun chemin n'est lu,
écrit ou supprimé s'il sort du dossier d'upload configuré.
"""

import base64
import binascii
import hashlib
import logging
import os
import re
import tempfile
import time
import uuid
from pathlib import Path
from typing import Optional, Set, Tuple, Union

import filetype

logger = logging.getLogger(__name__)

# Allow-lists
ALLOWED_IMAGE_MIME: Set[str] = {"image/jpeg", "image/png", "image/gif", "image/webp"}
ALLOWED_EXTENSIONS: Set[str] = {"jpg", "jpeg", "png", "gif", "webp"}

DEFAULT_MAX_BYTES = 5 * 1024 * 1024

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?;base64,", re.IGNORECASE)

PathLike = Union[str, Path]


def _size_message(max_bytes: int) -> str:
    return f"Taille invalide (max {max_bytes // (1024 * 1024)} MB)"


# ----------------------------------------------------------
# Erreurs typées
# ----------------------------------------------------------

class UploadError(ValueError):
    """Base des erreurs d'upload. `status_code` est le code HTTP à renvoyer."""
    status_code = 400


class InvalidUpload(UploadError):
    status_code = 400


class UnsafePath(UploadError):
    status_code = 403


class StorageError(UploadError):
    status_code = 500


# ----------------------------------------------------------
# Contrôles sur ce que déclare le client
# ----------------------------------------------------------

def extension_of(filename: Optional[str]) -> str:
    """'Photo.JPG' -> 'jpg' ; '' si pas d'extension."""
    if not filename:
        return ""
    return Path(filename).suffix.lstrip(".").lower()


def check_declared(filename: Optional[str], content_type: Optional[str] = None) -> str:
    """
    Vérifie l'extension du nom d'origine et, si fourni, le type MIME déclaré.
    Retourne l'extension normalisée. Lève InvalidUpload si non autorisé.
    """
    ext = extension_of(filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise InvalidUpload(f"Extension non autorisée: {ext or '(aucune)'}")
    if content_type:
        declared = content_type.split(";")[0].strip().lower()
        if declared == "image/jpg":
            declared = "image/jpeg"
        if declared not in ALLOWED_IMAGE_MIME:
            raise InvalidUpload(f"Type non autorisé: {declared}")
    return ext


# ----------------------------------------------------------
# Contenu
# ----------------------------------------------------------

def decode_base64(data: str, *, max_bytes: int = DEFAULT_MAX_BYTES) -> bytes:
    """
    Décode un contenu base64 (préfixe `data:image/png;base64,` accepté).
    Lève InvalidUpload si le contenu n'est pas du base64 valide, est vide, ou
    dépasse `max_bytes` une fois décodé (contrôlé sur la longueur, avant décodage).
    """
    if not isinstance(data, str) or not data.strip():
        raise InvalidUpload("Contenu base64 manquant")
    payload = _DATA_URI.sub("", data.strip(), count=1)
    payload = "".join(payload.split())
    if len(payload) * 3 // 4 - payload.count("=") > max_bytes:
        raise InvalidUpload(_size_message(max_bytes))
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidUpload("Contenu base64 invalide")
    if not raw:
        raise InvalidUpload("Fichier vide")
    return raw


def detect_mime_and_ext(file_bytes: bytes) -> Tuple[str, str]:
    """
    Détecte le type réel via 'filetype' (signature binaire, jamais le type déclaré).
    Retourne (real_mime, ext_sans_point).
    """
    kind = filetype.guess(file_bytes)
    if kind is None:
        return "application/octet-stream", "bin"
    return kind.mime, kind.extension


def validate_bytes(file_bytes: bytes, *, max_bytes: int = DEFAULT_MAX_BYTES) -> Tuple[str, str, int, str]:
    """
    Retourne (real_mime, ext_sans_point, size_bytes, sha256).
    Lève InvalidUpload si vide, trop gros ou d'un type non autorisé.
    """
    size = len(file_bytes)
    if size == 0:
        raise InvalidUpload("Fichier vide")
    if size > max_bytes:
        raise InvalidUpload(_size_message(max_bytes))

    real_mime, ext = detect_mime_and_ext(file_bytes)
    if real_mime not in ALLOWED_IMAGE_MIME:
        raise InvalidUpload(f"Type non autorisé: {real_mime}")

    sha = hashlib.sha256(file_bytes).hexdigest()
    return real_mime, ext, size, sha


# ----------------------------------------------------------
# Noms et chemins
# ----------------------------------------------------------

def build_filename(original_name: Optional[str], sniffed_ext: str) -> str:
    """
    Nom unique : <horodatage ns en hex>-<aléa 12 hex>.<ext>
    L'extension d'origine est conservée si elle est autorisée, sinon celle détectée.
    """
    ext = extension_of(original_name)
    if ext not in ALLOWED_EXTENSIONS:
        ext = sniffed_ext.lstrip(".").lower()
    token = f"{time.time_ns():x}-{uuid.uuid4().hex[:12]}"
    return f"{token}.{ext}"


def resolve_within(base_dir: PathLike, name: str) -> Path:
    """
    Résout `name` sous `base_dir` et vérifie que le résultat y reste.
    Lève UnsafePath pour toute tentative de sortie (../, chemin absolu, lien).
    """
    if not name or "\x00" in name:
        raise UnsafePath("Chemin de fichier invalide")
    base = Path(base_dir).resolve()
    candidate = (base / name).resolve()
    if candidate == base or not candidate.is_relative_to(base):
        logger.warning("Tentative d'accès hors du dossier d'upload: %r", name)
        raise UnsafePath("Chemin de fichier invalide")
    return candidate


def store_bytes(base_dir: PathLike, filename: str, raw: bytes) -> Path:
    """
    Écrit le fichier via un fichier temporaire puis renommage atomique.
    Lève StorageError si le disque refuse l'écriture.
    """
    target = resolve_within(base_dir, filename)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(raw)
            os.replace(tmp_name, target)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise StorageError(f"Échec de l'écriture du fichier: {e}")
    logger.info("Fichier stocké: %s (%d octets)", target.name, len(raw))
    return target


def remove_file(base_dir: PathLike, filename: Optional[str]) -> bool:
    """Supprime le fichier s'il existe. Retourne True si un fichier a été supprimé."""
    if not filename:
        return False
    target = resolve_within(base_dir, filename)
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise StorageError(f"Échec de la suppression du fichier: {e}")
    logger.info("Fichier supprimé: %s", target.name)
    return True
