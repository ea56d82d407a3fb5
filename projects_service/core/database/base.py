"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the centralized database layer using SQLModel.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Current time as an aware UTC datetime; timestamp columns are timezone-aware."""
    return datetime.now(timezone.utc)


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


class AuditMixin(SQLModel):
    """Audit and soft-delete columns shared by every table.

    Rows are never physically removed; ``deleted_at`` marks them as gone and
    repositories exclude them from reads.
    """

    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": utcnow},
    )
    deleted_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_by: int = Field(nullable=False)
    updated_by: int = Field(nullable=False)
    deleted_by: Optional[int] = Field(default=None)

    def mark_deleted(self, user_id: int) -> None:
        """Soft-delete the row on behalf of ``user_id``."""
        self.deleted_by = user_id
        self.deleted_at = utcnow()
