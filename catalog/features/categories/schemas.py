from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


class CategoryCreateIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=64, examples=["Salles de réunion"])

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return _strip(value)


class CategoryUpdateIn(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=64, examples=["Matériel"])

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return _strip(value)


class CategoryOut(BaseModel):
    id: int
    name: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CategoryListOut(BaseModel):
    items: List[CategoryOut]
    total: int
