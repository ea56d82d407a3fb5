"""
API endpoints for project members.

Mounted under ``/v4/projects/{project_id}/members``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from projects_service.core.models.domain import AuthUser
from projects_service.core.models.io import ParamBody, ProjectMemberCreate, ProjectMemberUpdate
from projects_service.permissions.registry import RequirePolicy
from projects_service.server.schemas import get_request_id, wrap_response
from projects_service.server.services.deps import ProjectMemberServiceDep
from projects_service.server.services.members import member_to_dict

router = APIRouter(tags=["project-members"])


@router.get("/{project_id}/members", summary="List Project Members")
async def list_members(
    request: Request,
    project_id: int,
    service: ProjectMemberServiceDep,
    role: Optional[str] = Query(default=None, description="Only members with this project role"),
    user: AuthUser = Depends(RequirePolicy("projectMember.view")),
):
    members = await service.list_members(project_id, role)
    return wrap_response(get_request_id(request), members, total_count=len(members))


@router.get(
    "/{project_id}/members/{member_id}",
    summary="Get Project Member",
    responses={404: {"description": "Project or member not found"}},
)
async def get_member(
    request: Request,
    project_id: int,
    member_id: int,
    service: ProjectMemberServiceDep,
    user: AuthUser = Depends(RequirePolicy("projectMember.view")),
):
    return wrap_response(get_request_id(request), await service.get_member(project_id, member_id))


@router.post(
    "/{project_id}/members",
    status_code=status.HTTP_201_CREATED,
    summary="Add Project Member",
    description="Join the project, or add another user when allowed to.",
    responses={
        403: {"description": "Not allowed to add this user or role"},
        409: {"description": "User is already a member"},
    },
)
async def add_member(
    request: Request,
    project_id: int,
    service: ProjectMemberServiceDep,
    body: Optional[ParamBody[ProjectMemberCreate]] = None,
    user: AuthUser = Depends(RequirePolicy("projectMember.create")),
):
    data = body.param if body is not None else ProjectMemberCreate()
    member = await service.add_member(user, project_id, data)
    return wrap_response(get_request_id(request), member_to_dict(member), status_code=status.HTTP_201_CREATED)


@router.patch(
    "/{project_id}/members/{member_id}",
    summary="Update Project Member",
    responses={403: {"description": "Role change not allowed"}, 404: {"description": "Member not found"}},
)
async def update_member(
    request: Request,
    project_id: int,
    member_id: int,
    body: ParamBody[ProjectMemberUpdate],
    service: ProjectMemberServiceDep,
    user: AuthUser = Depends(RequirePolicy("projectMember.edit")),
):
    member = await service.update_member(user, project_id, member_id, body.param)
    return wrap_response(get_request_id(request), member)


@router.delete(
    "/{project_id}/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Project Member",
    responses={403: {"description": "Removal not allowed"}, 404: {"description": "Member not found"}},
)
async def delete_member(
    project_id: int,
    member_id: int,
    service: ProjectMemberServiceDep,
    user: AuthUser = Depends(RequirePolicy("projectMember.delete")),
):
    await service.delete_member(user, project_id, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
