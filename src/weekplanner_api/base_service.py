"""
Base service class with common CRUD operations
"""

from abc import ABC, abstractmethod
from datetime import datetime, UTC
from typing import Generic, TypeVar
from uuid import UUID, uuid4

from sqlmodel import Session, SQLModel, select

from weekplanner_api.common.error_handlers import (
    ResourceNotFoundError,
    safe_execute,
    validate_uuid,
)

T = TypeVar("T", bound=SQLModel)
CreateT = TypeVar("CreateT")
UpdateT = TypeVar("UpdateT")


class BaseService(ABC, Generic[T, CreateT, UpdateT]):
    """Base service class with common CRUD operations"""

    def __init__(self, model: type[T]):
        self.model = model

    @abstractmethod
    def _create_instance(self, data: CreateT, **kwargs) -> T:
        """Create a new model instance. Must be implemented by subclasses."""
        pass

    def create(self, session: Session, data: CreateT, **kwargs) -> T:
        """Create a new entity"""

        def create_operation():
            instance = self._create_instance(data, **kwargs)
            instance.id = uuid4()
            session.add(instance)
            session.flush()  # Get ID without committing
            return instance

        entity = safe_execute(session, create_operation)
        session.refresh(entity)
        return entity

    def get_by_id(self, session: Session, entity_id: str | UUID) -> T:
        """Get entity by ID"""
        entity_id = validate_uuid(entity_id, "entity_id")

        result = session.get(self.model, entity_id)
        if not result:
            raise ResourceNotFoundError(self.model.__name__, entity_id)

        return result

    def get_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int | None = None,
        **filters,
    ) -> list[T]:
        """Get all entities with optional equality filters"""
        statement = select(self.model)

        for key, value in filters.items():
            if hasattr(self.model, key) and value is not None:
                statement = statement.where(getattr(self.model, key) == value)

        # Creation order keeps listings stable for callers that care about it
        if hasattr(self.model, "created_at"):
            statement = statement.order_by(self.model.created_at.asc())

        statement = statement.offset(skip)
        if limit is not None:
            statement = statement.limit(limit)
        return list(session.exec(statement).all())

    def update(self, session: Session, entity_id: str | UUID, data: UpdateT) -> T:
        """Update entity"""
        # This will raise ResourceNotFoundError if not found
        entity = self.get_by_id(session, entity_id)

        def update_operation():
            update_data = data.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if hasattr(entity, field):
                    setattr(entity, field, value)

            if hasattr(entity, "updated_at"):
                entity.updated_at = datetime.now(UTC)

            session.add(entity)
            session.flush()
            return entity

        entity = safe_execute(session, update_operation)
        session.refresh(entity)
        return entity

    def delete(self, session: Session, entity_id: str | UUID) -> bool:
        """Delete entity"""
        # This will raise ResourceNotFoundError if not found
        entity = self.get_by_id(session, entity_id)

        def delete_operation():
            session.delete(entity)
            return True

        return safe_execute(session, delete_operation)
