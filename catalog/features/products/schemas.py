from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ---------- IN / UPDATE ----------

class ProductCreateIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=50, examples=["Salle Horizon"])
    description: str = Field("", examples=["Salle lumineuse, 12 places"])
    price: float = Field(..., ge=0, examples=[49.9])
    availability: bool = True
    # ids de catégories / id d'image existants
    category: List[int] = Field(default_factory=list, examples=[[1, 2]])
    picture: Optional[int] = Field(None, examples=[1])


class ProductUpdateIn(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    availability: Optional[bool] = None
    # remplace toutes les catégories si fourni
    category: Optional[List[int]] = None
    # null explicite = détacher l'image
    picture: Optional[int] = None


# ---------- OUT ----------

class CategoryRefOut(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class PictureRefOut(BaseModel):
    id: int
    title: Optional[str] = None
    slug: str
    file_path: str

    model_config = {"from_attributes": True}


class ProductOut(BaseModel):
    id: int
    title: str
    description: str
    price: float
    availability: bool
    picture: Optional[PictureRefOut] = None
    categories: List[CategoryRefOut] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProductListOut(BaseModel):
    items: List[ProductOut]
    total: int
