import re
import unicodedata
from typing import Optional

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
SLUG_MAX_LEN = 32


def slugify(value: Optional[str], max_len: int = SLUG_MAX_LEN) -> str:
    """'Chaise Élégante (bois)' -> 'chaise-elegante-bois'. Renvoie '' si rien d'exploitable."""
    norm = unicodedata.normalize("NFKD", (value or "").strip())
    ascii_only = "".join(ch for ch in norm if unicodedata.category(ch) != "Mn" and ord(ch) < 128)
    s = re.sub(r"[^a-z0-9]+", "-", ascii_only.lower())
    s = re.sub(r"-{2,}", "-", s).strip("-")
    return s[:max_len].rstrip("-")


def is_valid_slug(slug: Optional[str]) -> bool:
    return bool(slug) and len(slug) <= SLUG_MAX_LEN and SLUG_PATTERN.fullmatch(slug) is not None


def resolve_slug(slug: Optional[str], *fallbacks: Optional[str]) -> str:
    """
    Slug explicite (validé tel quel) ou dérivé du premier fallback exploitable.
    Lève ValueError si le slug fourni est invalide ou si rien ne permet d'en dériver un.
    """
    if slug is not None and slug != "":
        if not is_valid_slug(slug):
            raise ValueError("Slug must contain only lowercase letters, numbers, and hyphens.")
        return slug
    for candidate in fallbacks:
        derived = slugify(candidate)
        if derived:
            return derived
    raise ValueError("Slug cannot be empty.")
