"""
Administrative project endpoints.

Used by indexing jobs to export projects, with their phases and products,
one id range at a time.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic.alias_generators import to_snake

from projects_service.core.models.domain import AuthUser
from projects_service.permissions.registry import RequirePolicy
from projects_service.server.schemas import get_request_id, wrap_response
from projects_service.server.services.deps import ProjectServiceDep

router = APIRouter(tags=["admin"])


@router.get(
    "/projects",
    summary="Export Project Range",
    description="Projects with startId <= id <= endId, each with its phases and their products.",
    responses={
        400: {"description": "startId greater than endId"},
        403: {"description": "Caller is not a projects administrator"},
    },
)
async def list_project_range(
    request: Request,
    service: ProjectServiceDep,
    start_id: int = Query(alias="startId", ge=1),
    end_id: int = Query(alias="endId", ge=1),
    fields: Optional[str] = Query(default=None, description="Comma separated project fields"),
    user: AuthUser = Depends(RequirePolicy("project.admin")),
):
    selected = [to_snake(f.strip()) for f in fields.split(",") if f.strip()] if fields else None
    projects = await service.find_project_range(start_id, end_id, selected)
    return wrap_response(get_request_id(request), projects, total_count=len(projects))
