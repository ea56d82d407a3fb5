"""Project member I/O models for API requests and responses."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from projects_service.permissions.constants import ProjectMemberRole

from .common import AuditRead
from ..base import CamelSchema


class ProjectMemberRead(AuditRead):
    """Schema for reading a project member."""

    id: int
    user_id: int
    project_id: int
    role: str
    is_primary: bool


class ProjectMemberCreate(CamelSchema):
    """
    Schema for adding a project member.

    ``user_id`` defaults to the caller. ``role`` defaults to the caller's
    default project role when joining, and to customer when adding someone else.
    """

    user_id: Optional[int] = Field(default=None, ge=1)
    role: Optional[ProjectMemberRole] = None
    is_primary: Optional[bool] = None


class ProjectMemberUpdate(CamelSchema):
    """Schema for changing a member's role or primary flag."""

    role: Optional[ProjectMemberRole] = None
    is_primary: Optional[bool] = None
