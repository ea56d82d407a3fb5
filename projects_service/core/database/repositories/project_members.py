"""
Project member repository.

This module provides data access operations for project membership,
including role-filtered listing and primary member maintenance.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.project_members import ProjectMember
from .base import BaseRepository


class ProjectMemberRepository(BaseRepository[ProjectMember]):
    """Repository for project member data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProjectMember)

    async def list_by_project(self, project_id: int, role: Optional[str] = None) -> List[ProjectMember]:
        """List live members of a project, oldest first.

        Args:
            project_id: Project ID
            role: Only return members holding this project role

        Returns:
            List of ProjectMember instances
        """
        stmt = self._live().where(ProjectMember.project_id == project_id)
        if role is not None:
            stmt = stmt.where(ProjectMember.role == role)
        stmt = stmt.order_by(ProjectMember.created_at, ProjectMember.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_project_and_id(self, project_id: int, member_id: int) -> Optional[ProjectMember]:
        stmt = self._live().where(ProjectMember.project_id == project_id, ProjectMember.id == member_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_project_and_user(self, project_id: int, user_id: int) -> Optional[ProjectMember]:
        """Get the live membership of ``user_id`` in a project."""
        stmt = self._live().where(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def clear_primary(self, project_id: int, role: str, except_member_id: Optional[int] = None) -> int:
        """Unset the primary flag of every member holding ``role``.

        Returns:
            Number of members that were changed
        """
        stmt = self._live().where(
            ProjectMember.project_id == project_id,
            ProjectMember.role == role,
            ProjectMember.is_primary.is_(True),
        )
        if except_member_id is not None:
            stmt = stmt.where(ProjectMember.id != except_member_id)
        members = list((await self.session.execute(stmt)).scalars().all())
        for member in members:
            member.is_primary = False
            self.session.add(member)
        if members:
            await self.session.flush()
        return len(members)

    async def oldest_with_role(
        self, project_id: int, role: str, exclude_member_id: Optional[int] = None
    ) -> Optional[ProjectMember]:
        """Return the longest-standing live member holding ``role``."""
        stmt = self._live().where(ProjectMember.project_id == project_id, ProjectMember.role == role)
        if exclude_member_id is not None:
            stmt = stmt.where(ProjectMember.id != exclude_member_id)
        stmt = stmt.order_by(ProjectMember.created_at, ProjectMember.id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
