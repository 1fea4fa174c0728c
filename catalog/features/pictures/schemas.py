from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class PictureBase64In(BaseModel):
    """Upload JSON : `{"fileName": "chaise.png", "fileData": "<base64>", "title": "...", "slug": "..."}`"""
    file_name: str = Field(..., alias="fileName", min_length=1, max_length=255)
    file_data: str = Field(..., alias="fileData", min_length=1)
    title: Optional[str] = Field(None, max_length=32)
    slug: Optional[str] = Field(None, max_length=32)

    model_config = {"populate_by_name": True}


class PictureUpdateBase64In(BaseModel):
    """Mise à jour JSON : fichier optionnel (fileName + fileData), titre / slug optionnels."""
    file_name: Optional[str] = Field(None, alias="fileName", min_length=1, max_length=255)
    file_data: Optional[str] = Field(None, alias="fileData", min_length=1)
    title: Optional[str] = Field(None, max_length=32)
    slug: Optional[str] = Field(None, max_length=32)

    model_config = {"populate_by_name": True}


class PictureOut(BaseModel):
    id: int
    image_path: str
    file_path: str
    title: Optional[str] = None
    slug: str
    mime_type: str
    bytes: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PictureListOut(BaseModel):
    items: List[PictureOut]
    total: int
