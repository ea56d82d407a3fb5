"""
Project member invite entity models.

An invite targets either a known user id or an email address.
"""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from projects_service.core.models.domain import InviteStatus

from ..base import AuditMixin, Base


class ProjectMemberInvite(Base, AuditMixin, table=True):
    """Entity for invitations to join a project.

    Table: project_member_invites
    """

    __tablename__ = "project_member_invites"

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    user_id: Optional[int] = Field(default=None, index=True)
    email: Optional[str] = Field(default=None, max_length=255, index=True)
    role: str = Field(max_length=45)
    status: str = Field(default=InviteStatus.pending.value, max_length=45)

    def is_addressed_to(self, user_id: int, email: Optional[str]) -> bool:
        """Whether the invite was sent to the given user id or email."""
        if self.user_id is not None and self.user_id == user_id:
            return True
        return bool(self.email and email and self.email.lower() == email.lower())

    def __repr__(self) -> str:
        return f"ProjectMemberInvite(id={self.id}, project_id={self.project_id}, status={self.status})"
