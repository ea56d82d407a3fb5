"""
Project entity models.

This module contains the database entity for projects, the aggregate root of
the service. Members, invites, attachments and phases reference a project by
``project_id``.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, DateTime, Index, Numeric
from sqlmodel import Field

from ..base import AuditMixin, Base, utcnow


class Project(Base, AuditMixin, table=True):
    """Entity for projects.

    Table: projects
    """

    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_created_at", "created_at"),
        Index("ix_projects_name", "name"),
        Index("ix_projects_type", "type"),
        Index("ix_projects_status", "status"),
        Index("ix_projects_direct_project_id", "direct_project_id"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    direct_project_id: Optional[int] = Field(default=None)
    billing_account_id: Optional[int] = Field(default=None)
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)
    external: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    bookmarks: Optional[List[Dict[str, Any]]] = Field(default=None, sa_type=JSON)
    utm: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    estimated_price: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(10, 2), nullable=True))
    actual_price: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(10, 2), nullable=True))
    terms: List[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    type: str = Field(max_length=45)
    status: str = Field(max_length=45)
    details: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    challenge_eligibility: Optional[List[Dict[str, Any]]] = Field(default=None, sa_type=JSON)
    cancel_reason: Optional[str] = Field(default=None)
    template_id: Optional[int] = Field(default=None)
    version: str = Field(default="v3", max_length=3)
    last_activity_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=DateTime(timezone=True))
    # A user id, or the name of a bot ("coderbot", "system") acting on the project.
    last_activity_user_id: str = Field(max_length=45)

    def touch(self, user_id: int | str) -> None:
        """Record activity on the project by ``user_id``."""
        self.last_activity_at = utcnow()
        self.last_activity_user_id = str(user_id)

    def __repr__(self) -> str:
        return f"Project(id={self.id}, name={self.name!r}, status={self.status})"
