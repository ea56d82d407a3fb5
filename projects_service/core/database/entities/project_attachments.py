"""Project attachment entity models."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field

from ..base import AuditMixin, Base


class ProjectAttachment(Base, AuditMixin, table=True):
    """File or link attached to a project.

    Table: project_attachments
    """

    __tablename__ = "project_attachments"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    title: Optional[str] = Field(default=None, max_length=255)
    size: Optional[int] = Field(default=None)
    category: Optional[str] = Field(default=None, max_length=45)
    description: Optional[str] = Field(default=None)
    path: str = Field(max_length=2048)
    content_type: Optional[str] = Field(default=None, max_length=255)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    allowed_users: Optional[List[int]] = Field(default=None, sa_type=JSON)
