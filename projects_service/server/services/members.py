"""
Project member service.

Membership rules:

- users join a project themselves with a role allowed for their Topcoder
  roles; adding someone else takes CREATE_PROJECT_MEMBER_FOR_OTHERS;
- the first member holding a role becomes its primary member, and promoting
  a member to primary demotes the previous one;
- when a primary member leaves, the longest-standing member with the same
  role takes over.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from projects_service.core.database import transaction
from projects_service.core.database.entities import ProjectMember
from projects_service.core.database.repositories import ProjectMemberRepository, ProjectRepository
from projects_service.core.errors import ConflictError, ForbiddenError, NotFoundError
from projects_service.core.logging_config import get_logger
from projects_service.core.models.domain import AuthUser
from projects_service.core.models.io import ProjectMemberCreate, ProjectMemberRead, ProjectMemberUpdate
from projects_service.events import BusApiClient, BusTopic
from projects_service.permissions import (
    ProjectMemberRole,
    get_default_project_role,
    has_permission,
    is_project_role_allowed,
)
from projects_service.permissions import policies as P

logger = get_logger(__name__)


def member_to_dict(member: ProjectMember) -> Dict[str, Any]:
    return ProjectMemberRead.model_validate(member).model_dump(mode="json", by_alias=True)


class ProjectMemberService:
    """Project membership use cases."""

    def __init__(self, session: AsyncSession, bus: BusApiClient) -> None:
        self.session = session
        self.bus = bus
        self.projects = ProjectRepository(session)
        self.members = ProjectMemberRepository(session)

    async def _ensure_project(self, project_id: int) -> None:
        if await self.projects.get_by_id(project_id) is None:
            raise NotFoundError(f"project not found for id {project_id}")

    async def _get_member_or_404(self, project_id: int, member_id: int) -> ProjectMember:
        member = await self.members.get_by_project_and_id(project_id, member_id)
        if member is None:
            raise NotFoundError(f"member not found for project id {project_id}, id {member_id}")
        return member

    async def list_members(self, project_id: int, role: Optional[str] = None) -> List[Dict[str, Any]]:
        await self._ensure_project(project_id)
        return [member_to_dict(m) for m in await self.members.list_by_project(project_id, role)]

    async def get_member(self, project_id: int, member_id: int) -> Dict[str, Any]:
        await self._ensure_project(project_id)
        return member_to_dict(await self._get_member_or_404(project_id, member_id))

    async def create_membership(
        self,
        project_id: int,
        user_id: int,
        role: str,
        actor_id: int,
        is_primary: Optional[bool] = None,
    ) -> ProjectMember:
        """Stage a membership without permission checks; the caller owns the transaction.

        Without an explicit ``is_primary`` the member becomes primary when
        nobody holds the role as primary yet.
        """
        if is_primary is None:
            current = await self.members.list_by_project(project_id, role)
            is_primary = not any(m.is_primary for m in current)
        if is_primary:
            await self.members.clear_primary(project_id, role)
        return await self.members.create(
            ProjectMember(
                project_id=project_id,
                user_id=user_id,
                role=role,
                is_primary=is_primary,
                created_by=actor_id,
                updated_by=actor_id,
            )
        )

    async def add_member(
        self,
        user: AuthUser,
        project_id: int,
        data: ProjectMemberCreate,
    ) -> ProjectMember:
        """Add the caller, or another user, to a project.

        Raises:
            ForbiddenError: Not allowed to add others, or to hold the role
            ConflictError: The user is already a member
        """
        await self._ensure_project(project_id)
        members = await self.members.list_by_project(project_id)

        target_user_id = data.user_id or user.user_id
        for_self = target_user_id == user.user_id

        if not for_self and not has_permission(P.CREATE_PROJECT_MEMBER_FOR_OTHERS, user, members):
            raise ForbiddenError("You don't have permissions to add other users as project members.")

        if data.role is not None:
            role = data.role.value
        elif for_self:
            role = get_default_project_role(user)
            if role is None:
                raise ForbiddenError("Cannot find a default project role for your Topcoder roles.")
        else:
            role = ProjectMemberRole.CUSTOMER.value

        if for_self and not is_project_role_allowed(user.roles, role):
            raise ForbiddenError(f'You are not allowed to join the project as "{role}".')

        if any(m.user_id == target_user_id for m in members):
            raise ConflictError(f"User already registered for role: {role}")

        async with transaction(self.session):
            member = await self.create_membership(project_id, target_user_id, role, user.user_id, data.is_primary)
        logger.info(f"User {target_user_id} added to project {project_id} as {role} by user {user.user_id}")

        await self.bus.publish(BusTopic.PROJECT_MEMBER_ADDED, member_to_dict(member))
        return member

    async def update_member(
        self, user: AuthUser, project_id: int, member_id: int, data: ProjectMemberUpdate
    ) -> Dict[str, Any]:
        """Change a member's role and/or primary flag."""
        await self._ensure_project(project_id)
        members = await self.members.list_by_project(project_id)
        member = await self._get_member_or_404(project_id, member_id)
        original = member_to_dict(member)

        if member.role != ProjectMemberRole.CUSTOMER.value and not has_permission(
            P.UPDATE_PROJECT_MEMBER_NON_CUSTOMER, user, members
        ):
            raise ForbiddenError("You don't have permission to update a non-customer member.")

        new_role = data.role.value if data.role is not None else member.role
        if (
            new_role == ProjectMemberRole.COPILOT.value
            and member.role != new_role
            and not has_permission(P.UPDATE_PROJECT_MEMBER_TO_COPILOT, user, members)
        ):
            raise ForbiddenError('You don\'t have permission to change a member role to "copilot".')

        async with transaction(self.session):
            if data.is_primary:
                await self.members.clear_primary(project_id, new_role, except_member_id=member.id)
            member.role = new_role
            if data.is_primary is not None:
                member.is_primary = data.is_primary
            member.updated_by = user.user_id
            member = await self.members.update(member)
        logger.info(f"Member {member_id} of project {project_id} updated by user {user.user_id}")

        updated = member_to_dict(member)
        await self.bus.publish(BusTopic.PROJECT_MEMBER_UPDATED, {"original": original, "updated": updated})
        return updated

    async def delete_member(self, user: AuthUser, project_id: int, member_id: int) -> None:
        """Remove a member; a removed primary hands over to the oldest same-role member."""
        await self._ensure_project(project_id)
        members = await self.members.list_by_project(project_id)
        member = await self._get_member_or_404(project_id, member_id)

        if (
            member.user_id != user.user_id
            and member.role != ProjectMemberRole.CUSTOMER.value
            and not has_permission(P.DELETE_PROJECT_MEMBER_NON_CUSTOMER, user, members)
        ):
            raise ForbiddenError("You don't have permission to delete a non-customer member.")

        async with transaction(self.session):
            was_primary = member.is_primary
            await self.members.soft_delete(member, user.user_id)
            if was_primary:
                successor = await self.members.oldest_with_role(project_id, member.role, exclude_member_id=member.id)
                if successor is not None:
                    successor.is_primary = True
                    successor.updated_by = user.user_id
                    await self.members.update(successor)
                    logger.info(f"Member {successor.id} is now primary {member.role} of project {project_id}")
        logger.info(f"Member {member_id} removed from project {project_id} by user {user.user_id}")

        await self.bus.publish(BusTopic.PROJECT_MEMBER_REMOVED, member_to_dict(member))
