"""Project member invite I/O models for API requests and responses."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, model_validator

from projects_service.core.models.domain import InviteStatus
from projects_service.permissions.constants import ProjectMemberRole

from .common import AuditRead
from ..base import CamelSchema


class ProjectMemberInviteRead(AuditRead):
    """Schema for reading an invite."""

    id: int
    project_id: int
    user_id: Optional[int] = None
    email: Optional[str] = None
    role: str
    status: str


class ProjectMemberInviteCreate(CamelSchema):
    """Schema for inviting users (by id) and/or people (by email) with one role."""

    user_ids: Optional[List[int]] = None
    emails: Optional[List[str]] = None
    role: ProjectMemberRole

    @model_validator(mode="after")
    def _require_recipients(self) -> "ProjectMemberInviteCreate":
        if not self.user_ids and not self.emails:
            raise ValueError("Either userIds or emails must be provided")
        for email in self.emails or []:
            if "@" not in email or len(email) > 255:
                raise ValueError(f"Invalid email: {email}")
        return self


class ProjectMemberInviteUpdate(CamelSchema):
    """Schema for answering an invite."""

    status: InviteStatus


class InviteFailure(CamelSchema):
    user_id: Optional[int] = None
    email: Optional[str] = None
    message: str


class ProjectMemberInviteCreateResult(CamelSchema):
    """Outcome of an invite request: created invites and refused recipients."""

    success: List[ProjectMemberInviteRead] = Field(default_factory=list)
    failed: List[InviteFailure] = Field(default_factory=list)
