"""
Named access policies.

Routes protect themselves with ``Depends(RequirePolicy("project.edit"))``.
The dependency authenticates the caller, loads the members of the project
addressed by the ``project_id`` path parameter (when there is one), evaluates
the named policy and refuses the request with 403 when it does not pass.
Finer-grained checks that depend on the request body are done by services
with ``has_permission``.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, List, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from projects_service.core.database import get_session
from projects_service.core.database.entities import ProjectMember
from projects_service.core.database.repositories import (
    ProjectMemberInviteRepository,
    ProjectMemberRepository,
)
from projects_service.core.errors import ForbiddenError
from projects_service.core.logging_config import get_logger
from projects_service.core.models.domain import AuthUser
from projects_service.server.core.auth import get_current_user

from . import policies as P
from .evaluator import has_permission
from .policies import Permission

logger = get_logger(__name__)


class PolicyContext:
    """What a policy may look at: the caller, the project and its members."""

    def __init__(self, user: AuthUser, session: AsyncSession, project_id: Optional[int] = None) -> None:
        self.user = user
        self.session = session
        self.project_id = project_id
        self._members: Optional[List[ProjectMember]] = None

    async def project_members(self) -> Optional[List[ProjectMember]]:
        """Live members of the addressed project, loaded once; None outside a project."""
        if self.project_id is None:
            return None
        if self._members is None:
            self._members = await ProjectMemberRepository(self.session).list_by_project(self.project_id)
        return self._members

    async def allows(self, permission: Permission) -> bool:
        return has_permission(permission, self.user, await self.project_members())

    async def is_invited(self) -> bool:
        """Whether the caller has an open invite to the addressed project."""
        if self.project_id is None:
            return False
        invites = await ProjectMemberInviteRepository(self.session).find_open_for(
            self.project_id, user_id=self.user.user_id, email=self.user.email
        )
        return bool(invites)


Policy = Callable[[PolicyContext], Awaitable[bool]]


def _requires(permission: Permission) -> Policy:
    async def policy(ctx: PolicyContext) -> bool:
        return await ctx.allows(permission)

    return policy


def _requires_any(*permissions: Permission) -> Policy:
    async def policy(ctx: PolicyContext) -> bool:
        for permission in permissions:
            if await ctx.allows(permission):
                return True
        return False

    return policy


async def _can_view_project(ctx: PolicyContext) -> bool:
    return await ctx.allows(P.READ_PROJECT) or await ctx.is_invited()


async def _can_view_invites(ctx: PolicyContext) -> bool:
    return await ctx.allows(P.READ_PROJECT_INVITE_NOT_OWN) or await ctx.is_invited()


async def _authenticated(ctx: PolicyContext) -> bool:
    # Invite answers and withdrawals depend on the invite itself; the service decides.
    return True


POLICIES: Dict[str, Policy] = {
    "project.view": _can_view_project,
    "project.create": _requires(P.CREATE_PROJECT),
    "project.edit": _requires(P.UPDATE_PROJECT),
    "project.delete": _requires(P.DELETE_PROJECT),
    "project.admin": _requires(P.MANAGE_PROJECTS_ADMIN),
    "projectMember.view": _requires(P.READ_PROJECT_MEMBER),
    "projectMember.create": _requires_any(P.CREATE_PROJECT_MEMBER, P.CREATE_PROJECT_MEMBER_OWN),
    "projectMember.edit": _requires(P.UPDATE_PROJECT_MEMBER),
    "projectMember.delete": _requires(P.DELETE_PROJECT_MEMBER),
    "projectMemberInvite.view": _can_view_invites,
    "projectMemberInvite.create": _requires(P.CREATE_PROJECT_INVITE),
    "projectMemberInvite.edit": _authenticated,
    "projectMemberInvite.delete": _authenticated,
    "form.create": _requires(P.MANAGE_PROJECT_METADATA),
    "form.view": _requires(P.READ_PROJECT_METADATA),
    "planConfig.create": _requires(P.MANAGE_PROJECT_METADATA),
    "planConfig.view": _requires(P.READ_PROJECT_METADATA),
    "priceConfig.create": _requires(P.MANAGE_PROJECT_METADATA),
    "priceConfig.view": _requires(P.READ_PROJECT_METADATA),
}


def _project_id_from(request: Request) -> Optional[int]:
    raw = request.path_params.get("project_id")
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def RequirePolicy(name: str):
    """
    Build a FastAPI dependency enforcing the named policy.

    Args:
        name: Policy name, e.g. ``"project.edit"``

    Returns:
        A dependency returning the authenticated caller when the policy passes

    Raises:
        KeyError: At route declaration time, when no policy has that name
    """
    if name not in POLICIES:
        raise KeyError(f"Unknown policy: {name}")
    policy = POLICIES[name]

    async def dependency(
        request: Request,
        user: AuthUser = Depends(get_current_user),
        session: AsyncSession = Depends(get_session),
    ) -> AuthUser:
        ctx = PolicyContext(user, session, _project_id_from(request))
        if not await policy(ctx):
            logger.info(f"Policy {name} refused user {user.user_id} on {request.method} {request.url.path}")
            raise ForbiddenError()
        return user

    dependency.__name__ = f"require_{name.replace('.', '_')}"
    return dependency
