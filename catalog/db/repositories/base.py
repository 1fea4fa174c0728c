from typing import Any, Generic, Iterable, List, Optional, Sequence, Type, TypeVar
from sqlmodel import SQLModel, Session, select, func

# Product, Category, Picture, Booking, User
ModelT = TypeVar("ModelT", bound=SQLModel)

class BaseRepository(Generic[ModelT]):
    """
    Persistance générique d'une table SQLModel, sans logique métier.

    Toutes les écritures acceptent `commit=False` : l'entité est alors seulement
    flushée (ids disponibles) et le service appelle `commit()` une fois toutes
    les modifications de la transaction faites.
    """

    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    def _persist(self, entity: ModelT, commit: bool) -> ModelT:
        self.session.add(entity)
        if not commit:
            self.session.flush()
            return entity
        self.session.commit()
        self.session.refresh(entity)
        return entity

    # ---------- Lecture ----------

    def list(self, offset: int = 0, limit: int = 100) -> Sequence[ModelT]:
        """Page d'enregistrements, triée par id pour une pagination stable."""
        statement = select(self.model).order_by(self.model.id).offset(offset).limit(limit)
        return self.session.exec(statement).all()

    def count(self) -> int:
        return self.session.exec(select(func.count(self.model.id))).one()

    def get(self, id_: Any) -> Optional[ModelT]:
        return self.session.get(self.model, id_)

    def get_many(self, ids: Iterable[int]) -> List[ModelT]:
        """
        Enregistrements correspondant à `ids`, dans l'ordre demandé et sans doublon.
        Les ids inconnus sont absents du résultat : à l'appelant de les signaler.
        """
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return []
        rows = self.session.exec(select(self.model).where(self.model.id.in_(wanted))).all()
        by_id = {row.id: row for row in rows}
        return [by_id[i] for i in wanted if i in by_id]

    # ---------- Écriture ----------

    def create(self, *, commit: bool = True, **fields) -> ModelT:
        return self._persist(self.model(**fields), commit)

    def update(self, entity: ModelT, *, commit: bool = True, **changes) -> ModelT:
        for key, value in changes.items():
            setattr(entity, key, value)
        return self._persist(entity, commit)

    def save(self, entity: ModelT, *, commit: bool = True) -> ModelT:
        """Persiste une entité déjà modifiée (relations comprises)."""
        return self._persist(entity, commit)

    def delete(self, entity: ModelT, *, commit: bool = True) -> None:
        self.session.delete(entity)
        if commit:
            self.session.commit()
        else:
            self.session.flush()

    # ---------- Transaction ----------

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
