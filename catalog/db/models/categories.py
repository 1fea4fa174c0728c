from typing import List, TYPE_CHECKING
from sqlmodel import Field, Relationship

from .base import BaseModelDB
from .links import ProductCategoryLink

if TYPE_CHECKING:
    from .products import Product


class Category(BaseModelDB, table=True):
    name: str = Field(index=True, unique=True, max_length=64, description="Nom de la catégorie (ex: 'Salles', 'Matériel')")

    products: List["Product"] = Relationship(back_populates="categories", link_model=ProductCategoryLink)
