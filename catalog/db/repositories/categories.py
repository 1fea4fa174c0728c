from typing import Optional
from sqlmodel import select

from catalog.db.repositories.base import BaseRepository
from catalog.db.models.categories import Category

class CategoryRepository(BaseRepository[Category]):
    model = Category

    def get_by_name(self, name: str) -> Optional[Category]:
        return self.session.exec(
            select(self.model).where(self.model.name == name)
        ).first()
