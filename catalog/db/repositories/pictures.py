from catalog.db.repositories.base import BaseRepository
from catalog.db.models.pictures import Picture

class PictureRepository(BaseRepository[Picture]):
    """CRUD Pictures (le fichier lui-même est géré par utils/uploads)."""
    model = Picture
