from fastapi import HTTPException, status

from catalog.db.repositories.categories import CategoryRepository
from catalog.db.models.base import utc_now
from catalog.db.models.categories import Category
from catalog.features.categories.schemas import CategoryCreateIn, CategoryUpdateIn


class CategoryService:
    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    def list(self, offset: int, limit: int):
        items = self.repo.list(offset, limit)
        total = self.repo.count()
        return {"items": items, "total": total}

    def get(self, category_id: int) -> Category:
        category = self.repo.get(category_id)
        if not category:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Catégorie introuvable.")
        return category

    def _ensure_name_free(self, name: str, *, exclude_id: int | None = None) -> None:
        existing = self.repo.get_by_name(name)
        if existing and existing.id != exclude_id:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Catégorie déjà existante.")

    def create(self, payload: CategoryCreateIn) -> Category:
        self._ensure_name_free(payload.name)
        return self.repo.create(name=payload.name)

    def update(self, category_id: int, payload: CategoryUpdateIn) -> Category:
        category = self.get(category_id)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes:
            self._ensure_name_free(changes["name"], exclude_id=category.id)
        changes["updated_at"] = utc_now()
        return self.repo.update(category, **changes)

    def delete(self, category_id: int) -> None:
        category = self.get(category_id)
        self.repo.delete(category)
