"""
Base repository interfaces and utilities.

This module provides the foundational repository pattern used across all
repository implementations. Repositories stage changes (``add`` + ``flush``)
and never commit: callers wrap a whole operation in
``projects_service.core.database.transaction`` so multi-row changes are atomic.
"""

from __future__ import annotations

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class BaseRepository(Generic[EntityType]):
    """Base async repository with CRUD operations over soft-deletable entities."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    def _live(self):
        """Select statement over rows that are not soft-deleted."""
        return select(self.model).where(self.model.deleted_at.is_(None))

    async def create(self, entity: EntityType) -> EntityType:
        """Stage a new entity and flush it so generated fields are populated."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        """Get a live entity by its primary key."""
        stmt = self._live().where(self.model.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, entity: EntityType) -> EntityType:
        """Stage changes made to an entity."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def soft_delete(self, entity: EntityType, user_id: int) -> EntityType:
        """Mark an entity deleted by ``user_id``."""
        entity.mark_deleted(user_id)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity
