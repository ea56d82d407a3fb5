"""
API endpoints for project member invites.

Mounted under ``/v4/projects/{project_id}/invites``.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from projects_service.core.models.domain import AuthUser
from projects_service.core.models.io import ParamBody, ProjectMemberInviteCreate, ProjectMemberInviteUpdate
from projects_service.permissions.registry import RequirePolicy
from projects_service.server.schemas import get_request_id, wrap_response
from projects_service.server.services.deps import ProjectMemberInviteServiceDep

router = APIRouter(tags=["project-member-invites"])


@router.get("/{project_id}/invites", summary="List Open Invites")
async def list_invites(
    request: Request,
    project_id: int,
    service: ProjectMemberInviteServiceDep,
    user: AuthUser = Depends(RequirePolicy("projectMemberInvite.view")),
):
    invites = await service.list_invites(user, project_id)
    return wrap_response(get_request_id(request), invites, total_count=len(invites))


@router.post(
    "/{project_id}/invites",
    status_code=status.HTTP_201_CREATED,
    summary="Invite Users",
    description="Invite users by id and/or email. Recipients that cannot be invited are listed in `failed`.",
    responses={403: {"description": "Not allowed to invite with this role"}},
)
async def create_invites(
    request: Request,
    project_id: int,
    body: ParamBody[ProjectMemberInviteCreate],
    service: ProjectMemberInviteServiceDep,
    user: AuthUser = Depends(RequirePolicy("projectMemberInvite.create")),
):
    result = await service.create_invites(user, project_id, body.param)
    return wrap_response(get_request_id(request), result, status_code=status.HTTP_201_CREATED)


@router.patch(
    "/{project_id}/invites/{invite_id}",
    summary="Answer Invite",
    responses={
        400: {"description": "Invite closed or status change not allowed"},
        403: {"description": "Not allowed to answer this invite"},
        404: {"description": "Invite not found"},
    },
)
async def update_invite(
    request: Request,
    project_id: int,
    invite_id: int,
    body: ParamBody[ProjectMemberInviteUpdate],
    service: ProjectMemberInviteServiceDep,
    user: AuthUser = Depends(RequirePolicy("projectMemberInvite.edit")),
):
    invite = await service.update_invite(user, project_id, invite_id, body.param)
    return wrap_response(get_request_id(request), invite)


@router.delete(
    "/{project_id}/invites/{invite_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel Invite",
    responses={403: {"description": "Not allowed to cancel this invite"}, 404: {"description": "Invite not found"}},
)
async def delete_invite(
    project_id: int,
    invite_id: int,
    service: ProjectMemberInviteServiceDep,
    user: AuthUser = Depends(RequirePolicy("projectMemberInvite.delete")),
):
    await service.delete_invite(user, project_id, invite_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
