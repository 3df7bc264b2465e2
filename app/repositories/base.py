"""Generic CRUD repository over a SQLAlchemy session."""

from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from app.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)

# Largest primary key a signed 64-bit integer column can hold.
MAX_ID = 2**63 - 1


class Repository(Generic[ModelT]):
    """
    CRUD for one model class. Writes commit immediately and refresh the entity
    so server-side defaults (ids, stamps) are populated.

    Storage failures propagate as SQLAlchemyError; callers decide the HTTP mapping.
    """

    def __init__(self, session: Session, model_class: type[ModelT]) -> None:
        self.session = session
        self.model_class = model_class

    def get_all(self) -> list[ModelT]:
        return self.session.query(self.model_class).order_by(self.model_class.id).all()

    def get_by_id(self, entity_id: int) -> ModelT | None:
        """None when no row has this id, including ids no integer column can store."""
        if not 0 < entity_id <= MAX_ID:
            return None
        return self.session.get(self.model_class, entity_id)

    def add(self, entity: ModelT) -> ModelT:
        self.session.add(entity)
        self._commit()
        self.session.refresh(entity)
        return entity

    def update(self, entity: ModelT) -> ModelT:
        entity = self.session.merge(entity)
        self._commit()
        self.session.refresh(entity)
        return entity

    def delete(self, entity_id: int) -> bool:
        """Delete by id; False if no such row."""
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        self.session.delete(entity)
        self._commit()
        return True

    def _commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
