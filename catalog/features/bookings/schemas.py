from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class BookingCreateIn(BaseModel):
    quantity: int = Field(1, ge=1, examples=[2])
    # ids des produits réservés
    product: List[int] = Field(default_factory=list, examples=[[1, 3]])


class BookingUpdateIn(BaseModel):
    quantity: Optional[int] = Field(None, ge=1)
    # remplace la liste des produits si fourni
    product: Optional[List[int]] = None


class BookingProductOut(BaseModel):
    id: int
    title: str
    availability: bool

    model_config = {"from_attributes": True}


class BookingOut(BaseModel):
    id: int
    quantity: int
    status: str
    user_id: Optional[int] = None
    products: List[BookingProductOut] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BookingListOut(BaseModel):
    items: List[BookingOut]
    total: int
