"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.

Feeding block and entry repositories only flush; the calling service owns
the transaction and decides when to commit or roll back. UserRepository
is the exception: its owner bootstrap helpers run outside any schedule
operation and commit themselves.
"""

from typing import Generic, TypeVar, Optional, List, Type, Iterable
from uuid import UUID
from sqlalchemy.orm import Session
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.
    All repositories should inherit from this class.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """Get entity by primary key"""
        return self.db.get(self.model, entity_id)

    def add(self, entity: ModelType) -> ModelType:
        """Stage a new entity and flush so generated keys are available"""
        self.db.add(entity)
        self.db.flush()
        return entity

    def add_all(self, entities: Iterable[ModelType]) -> List[ModelType]:
        """Stage several new entities in one flush"""
        entities = list(entities)
        self.db.add_all(entities)
        self.db.flush()
        return entities

    def delete(self, entity: ModelType) -> None:
        """Delete an entity (flush only)"""
        self.db.delete(entity)
        self.db.flush()

