"""
Service Dependencies.

Annotated dependencies handing route handlers the request-scoped database
session, the authenticated caller, the event bus and the services built on
top of them. FastAPI caches dependencies per request, so the policy check
and the handler share one session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from projects_service.core.database import get_session
from projects_service.core.models.domain import AuthUser
from projects_service.events import BusApiClient, get_event_bus
from projects_service.server.core.auth import get_current_user

from .invites import ProjectMemberInviteService
from .members import ProjectMemberService
from .projects import ProjectService

SessionDep = Annotated[AsyncSession, Depends(get_session)]
CurrentUserDep = Annotated[AuthUser, Depends(get_current_user)]
EventBusDep = Annotated[BusApiClient, Depends(get_event_bus)]


def get_project_service(session: SessionDep, bus: EventBusDep) -> ProjectService:
    return ProjectService(session, bus)


def get_member_service(session: SessionDep, bus: EventBusDep) -> ProjectMemberService:
    return ProjectMemberService(session, bus)


def get_invite_service(session: SessionDep, bus: EventBusDep) -> ProjectMemberInviteService:
    return ProjectMemberInviteService(session, bus)


ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
ProjectMemberServiceDep = Annotated[ProjectMemberService, Depends(get_member_service)]
ProjectMemberInviteServiceDep = Annotated[ProjectMemberInviteService, Depends(get_invite_service)]
