from typing import List, Optional, TYPE_CHECKING
from sqlmodel import Field, Relationship

from .base import BaseModelDB

if TYPE_CHECKING:
    from .products import Product


class Picture(BaseModelDB, table=True):
    """Images stockées sur le disque (UPLOAD_DIR), référencées dans la base."""

    image_path: str = Field(index=True, unique=True, max_length=255, description="Nom du fichier stocké dans UPLOAD_DIR")
    file_path: str = Field(max_length=255, description="URL publique (ex: /uploads/pictures/<fichier>)")
    title: Optional[str] = Field(default=None, max_length=32)
    slug: str = Field(index=True, max_length=32, description="Slug URL-safe ^[a-z0-9-]+$")

    mime_type: str = Field(description="Type MIME détecté (image/jpeg, image/png, etc.)")
    bytes: int = Field(description="Taille en octets")
    sha256: Optional[str] = Field(default=None, description="Hash du contenu")

    products: List["Product"] = Relationship(back_populates="picture")
