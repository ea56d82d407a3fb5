"""
Project member invite repository.

This module provides data access operations for invitations, looked up by
project and by recipient (user id or email).
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from projects_service.core.models.domain import OPEN_INVITE_STATUSES, InviteStatus

from ..entities.project_member_invites import ProjectMemberInvite
from .base import BaseRepository


class ProjectMemberInviteRepository(BaseRepository[ProjectMemberInvite]):
    """Repository for project member invite data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProjectMemberInvite)

    async def list_by_project(
        self, project_id: int, statuses: Optional[Iterable[str]] = None
    ) -> List[ProjectMemberInvite]:
        """List live invites of a project.

        Args:
            project_id: Project ID
            statuses: Only return invites in one of these statuses

        Returns:
            List of ProjectMemberInvite instances, oldest first
        """
        stmt = self._live().where(ProjectMemberInvite.project_id == project_id)
        if statuses is not None:
            stmt = stmt.where(ProjectMemberInvite.status.in_([InviteStatus(s).value for s in statuses]))
        stmt = stmt.order_by(ProjectMemberInvite.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_project_and_id(self, project_id: int, invite_id: int) -> Optional[ProjectMemberInvite]:
        stmt = self._live().where(ProjectMemberInvite.project_id == project_id, ProjectMemberInvite.id == invite_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_open_for(
        self, project_id: int, user_id: Optional[int] = None, email: Optional[str] = None
    ) -> List[ProjectMemberInvite]:
        """Find pending or requested invites addressed to a user id or email.

        Emails are compared case-insensitively.
        """
        conditions = []
        if user_id is not None:
            conditions.append(ProjectMemberInvite.user_id == user_id)
        if email:
            conditions.append(func.lower(ProjectMemberInvite.email) == email.lower())
        if not conditions:
            return []

        stmt = self._live().where(
            ProjectMemberInvite.project_id == project_id,
            ProjectMemberInvite.status.in_([s.value for s in OPEN_INVITE_STATUSES]),
            or_(*conditions),
        )
        result = await self.session.execute(stmt.order_by(ProjectMemberInvite.id))
        return list(result.scalars().all())
