"""
Project member entity models.

A member links a user to a project with a project role. At most one live
member per role is flagged primary; the service maintains that flag.
"""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from ..base import AuditMixin, Base


class ProjectMember(Base, AuditMixin, table=True):
    """Entity for project membership.

    Table: project_members
    """

    __tablename__ = "project_members"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    role: str = Field(max_length=45)
    is_primary: bool = Field(default=False)

    def __repr__(self) -> str:
        return f"ProjectMember(project_id={self.project_id}, user_id={self.user_id}, role={self.role})"
