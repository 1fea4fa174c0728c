from typing import List
from sqlmodel import select

from catalog.db.repositories.base import BaseRepository
from catalog.db.models.products import Product

class ProductRepository(BaseRepository[Product]):
    model = Product

    def list_by_picture(self, picture_id: int) -> List[Product]:
        """Produits illustrés par une image donnée."""
        return list(self.session.exec(
            select(self.model).where(self.model.picture_id == picture_id)
        ).all())
