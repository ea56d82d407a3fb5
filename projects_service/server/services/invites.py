"""
Project member invite service.

An invite is addressed to a user id or an email address and carries the
project role the recipient will get. ``pending`` invites are answered by
their recipient; ``requested`` invites (asked for on behalf of someone) are
answered by copilot managers and admins. Accepting creates the membership.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from projects_service.core.database import transaction
from projects_service.core.database.entities import ProjectMemberInvite
from projects_service.core.database.repositories import (
    ProjectMemberInviteRepository,
    ProjectMemberRepository,
    ProjectRepository,
)
from projects_service.core.errors import BadRequestError, ForbiddenError, NotFoundError
from projects_service.core.logging_config import get_logger
from projects_service.core.models.domain import (
    ACCEPTING_INVITE_STATUSES,
    OPEN_INVITE_STATUSES,
    AuthUser,
    InviteStatus,
)
from projects_service.core.models.io import (
    InviteFailure,
    ProjectMemberInviteCreate,
    ProjectMemberInviteCreateResult,
    ProjectMemberInviteRead,
    ProjectMemberInviteUpdate,
)
from projects_service.events import BusApiClient, BusTopic
from projects_service.permissions import ProjectMemberRole, has_permission
from projects_service.permissions import policies as P

from .members import ProjectMemberService, member_to_dict

logger = get_logger(__name__)

# Answers allowed for each open invite status.
INVITE_TRANSITIONS = {
    InviteStatus.pending: {InviteStatus.accepted, InviteStatus.refused, InviteStatus.canceled},
    InviteStatus.requested: {InviteStatus.request_approved, InviteStatus.request_rejected, InviteStatus.canceled},
}


def invite_to_dict(invite: ProjectMemberInvite) -> Dict[str, Any]:
    return ProjectMemberInviteRead.model_validate(invite).model_dump(mode="json", by_alias=True)


class ProjectMemberInviteService:
    """Invite use cases."""

    def __init__(self, session: AsyncSession, bus: BusApiClient) -> None:
        self.session = session
        self.bus = bus
        self.projects = ProjectRepository(session)
        self.members = ProjectMemberRepository(session)
        self.invites = ProjectMemberInviteRepository(session)
        self.member_service = ProjectMemberService(session, bus)

    async def _ensure_project(self, project_id: int) -> None:
        if await self.projects.get_by_id(project_id) is None:
            raise NotFoundError(f"project not found for id {project_id}")

    async def _get_invite_or_404(self, project_id: int, invite_id: int) -> ProjectMemberInvite:
        invite = await self.invites.get_by_project_and_id(project_id, invite_id)
        if invite is None:
            raise NotFoundError(f"invite not found for project id {project_id}, id {invite_id}")
        return invite

    async def list_invites(self, user: AuthUser, project_id: int) -> List[Dict[str, Any]]:
        """Open invites of a project; callers without READ_PROJECT_INVITE_NOT_OWN only see their own."""
        await self._ensure_project(project_id)
        members = await self.members.list_by_project(project_id)
        invites = await self.invites.list_by_project(project_id, statuses=OPEN_INVITE_STATUSES)
        if not has_permission(P.READ_PROJECT_INVITE_NOT_OWN, user, members):
            invites = [i for i in invites if i.is_addressed_to(user.user_id, user.email)]
        return [invite_to_dict(i) for i in invites]

    async def create_invites(
        self, user: AuthUser, project_id: int, data: ProjectMemberInviteCreate
    ) -> Dict[str, Any]:
        """Invite users and emails; recipients already in or invited are reported as failed."""
        await self._ensure_project(project_id)
        members = await self.members.list_by_project(project_id)
        role = data.role.value

        if role != ProjectMemberRole.CUSTOMER.value and not has_permission(P.ROLES_COPILOT_AND_ABOVE, user, members):
            raise ForbiddenError(f'You are not allowed to invite user as "{role}".')

        result = ProjectMemberInviteCreateResult()
        member_ids = {m.user_id for m in members}
        created: List[ProjectMemberInvite] = []

        async with transaction(self.session):
            for user_id in dict.fromkeys(data.user_ids or []):
                if user_id in member_ids:
                    result.failed.append(
                        InviteFailure(user_id=user_id, message="User is already a member of the project.")
                    )
                elif await self.invites.find_open_for(project_id, user_id=user_id):
                    result.failed.append(
                        InviteFailure(user_id=user_id, message="User is already invited to the project.")
                    )
                else:
                    created.append(await self._create_invite(user, project_id, role, user_id=user_id))

            for email in dict.fromkeys(e.lower() for e in data.emails or []):
                if await self.invites.find_open_for(project_id, email=email):
                    result.failed.append(InviteFailure(email=email, message="Email is already invited to the project."))
                else:
                    created.append(await self._create_invite(user, project_id, role, email=email))

        result.success = [ProjectMemberInviteRead.model_validate(i) for i in created]
        logger.info(
            f"User {user.user_id} invited {len(created)} recipient(s) to project {project_id}, "
            f"{len(result.failed)} refused"
        )
        for invite in created:
            await self.bus.publish(BusTopic.PROJECT_MEMBER_INVITE_CREATED, invite_to_dict(invite))
        return result.model_dump(mode="json", by_alias=True)

    async def _create_invite(
        self,
        user: AuthUser,
        project_id: int,
        role: str,
        user_id: Optional[int] = None,
        email: Optional[str] = None,
    ) -> ProjectMemberInvite:
        return await self.invites.create(
            ProjectMemberInvite(
                project_id=project_id,
                user_id=user_id,
                email=email,
                role=role,
                status=InviteStatus.pending.value,
                created_by=user.user_id,
                updated_by=user.user_id,
            )
        )

    async def update_invite(
        self, user: AuthUser, project_id: int, invite_id: int, data: ProjectMemberInviteUpdate
    ) -> Dict[str, Any]:
        """Answer an invite. Accepting or approving adds the recipient to the project.

        Raises:
            ForbiddenError: The caller may not answer this invite
            BadRequestError: The invite is closed, or the answer does not fit its status
        """
        await self._ensure_project(project_id)
        invite = await self._get_invite_or_404(project_id, invite_id)
        current = InviteStatus(invite.status)

        if current == InviteStatus.requested:
            if not has_permission(P.UPDATE_REQUESTED_INVITE, user):
                raise ForbiddenError("You don't have permissions to update requested invites.")
        elif not invite.is_addressed_to(user.user_id, user.email) and not has_permission(
            P.UPDATE_NOT_OWN_INVITE, user
        ):
            raise ForbiddenError("You don't have permissions to update invites for other users.")

        if current not in OPEN_INVITE_STATUSES:
            raise BadRequestError(f"Invite is already {current.value}")
        if data.status not in INVITE_TRANSITIONS[current]:
            raise BadRequestError(f"Invite in status {current.value} cannot be changed to {data.status.value}")

        new_member = None
        async with transaction(self.session):
            invite.status = data.status.value
            invite.updated_by = user.user_id
            if data.status in ACCEPTING_INVITE_STATUSES:
                member_user_id = invite.user_id
                if member_user_id is None and invite.is_addressed_to(user.user_id, user.email):
                    member_user_id = user.user_id
                    invite.user_id = user.user_id
                if member_user_id is None:
                    raise BadRequestError("Invite has no user to add to the project")
                if await self.members.get_by_project_and_user(project_id, member_user_id) is None:
                    new_member = await self.member_service.create_membership(
                        project_id, member_user_id, invite.role, user.user_id
                    )
            invite = await self.invites.update(invite)
        logger.info(f"Invite {invite_id} of project {project_id} set to {invite.status} by user {user.user_id}")

        data_out = invite_to_dict(invite)
        await self.bus.publish(BusTopic.PROJECT_MEMBER_INVITE_UPDATED, data_out)
        if new_member is not None:
            await self.bus.publish(BusTopic.PROJECT_MEMBER_ADDED, member_to_dict(new_member))
        return data_out

    async def delete_invite(self, user: AuthUser, project_id: int, invite_id: int) -> None:
        """Withdraw an invite: status becomes canceled and the row is soft-deleted."""
        await self._ensure_project(project_id)
        invite = await self._get_invite_or_404(project_id, invite_id)

        if not invite.is_addressed_to(user.user_id, user.email):
            members = await self.members.list_by_project(project_id)
            if invite.status == InviteStatus.requested.value:
                required = P.DELETE_REQUESTED_INVITE
            elif invite.role == ProjectMemberRole.CUSTOMER.value:
                required = P.DELETE_CUSTOMER_INVITE
            else:
                required = P.DELETE_NON_CUSTOMER_INVITE
            if not has_permission(required, user, members):
                raise ForbiddenError("You don't have permissions to cancel this invite.")

        async with transaction(self.session):
            invite.status = InviteStatus.canceled.value
            invite.updated_by = user.user_id
            invite = await self.invites.soft_delete(invite, user.user_id)
        logger.info(f"Invite {invite_id} of project {project_id} canceled by user {user.user_id}")

        await self.bus.publish(BusTopic.PROJECT_MEMBER_INVITE_DELETED, invite_to_dict(invite))
