"""
API endpoints for projects.

Search, read, create, patch and soft-delete projects. Every response is a v4
envelope; list responses carry ``totalCount`` in the envelope metadata.
"""

from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic.alias_generators import to_snake

from projects_service.core.errors import BadRequestError
from projects_service.core.logging_config import get_logger
from projects_service.core.models.domain import AuthUser
from projects_service.core.models.io import ParamBody, ProjectCreate, ProjectUpdate
from projects_service.permissions.registry import RequirePolicy
from projects_service.server.core.config import settings
from projects_service.server.schemas import get_request_id, wrap_response
from projects_service.server.services.deps import CurrentUserDep, ProjectServiceDep

logger = get_logger(__name__)

router = APIRouter(tags=["projects"])

DEFAULT_SORT = ("createdAt", "desc")


def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_sort(sort: Optional[str]) -> Tuple[str, str]:
    """``"<field> asc|desc"`` -> ``(field, direction)``; the direction defaults to asc."""
    if not sort:
        return DEFAULT_SORT
    parts = sort.split()
    if len(parts) == 1:
        return parts[0], "asc"
    if len(parts) == 2:
        return parts[0], parts[1].lower()
    raise BadRequestError(f"Invalid sort criteria: {sort}")


def parse_ids(value: Optional[str]) -> Optional[List[int]]:
    parts = _split(value)
    if not parts:
        return None
    try:
        return [int(part) for part in parts]
    except ValueError:
        raise BadRequestError(f"Invalid project id list: {value}")


@router.get(
    "",
    summary="Search Projects",
    description="Filter, sort and paginate the projects visible to the caller.",
    responses={400: {"description": "Invalid filter, sort or field"}},
)
async def list_projects(
    request: Request,
    user: CurrentUserDep,
    service: ProjectServiceDep,
    id: Optional[str] = Query(default=None, description="Project id or comma separated ids"),
    status_filter: Optional[str] = Query(default=None, alias="status", description="Comma separated statuses"),
    type: Optional[str] = Query(default=None),
    keyword: Optional[str] = Query(default=None, description="Matched against name and description"),
    member_only: bool = Query(default=False, alias="memberOnly"),
    sort: Optional[str] = Query(default=None, description="'<field> asc|desc'"),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    fields: Optional[str] = Query(default=None, description="Comma separated project fields"),
):
    """
    Search projects.

    Callers that may not read every project (or asking for ``memberOnly``)
    only get projects they are a member of or invited to.
    """
    filters = {
        "id": parse_ids(id),
        "status": _split(status_filter) or None,
        "type": type,
        "keyword": keyword,
    }
    page_size = min(limit or settings.default_page_size, settings.max_page_size)
    selected = [to_snake(f) for f in _split(fields)] or None

    projects, total = await service.list_projects(
        user,
        {k: v for k, v in filters.items() if v is not None},
        parse_sort(sort),
        page_size,
        offset,
        fields=selected,
        member_only=member_only,
    )
    return wrap_response(get_request_id(request), projects, total_count=total)


@router.get(
    "/{project_id}",
    summary="Get Project",
    description="A project with its members, open invites, attachments and phases.",
    responses={404: {"description": "Project not found"}},
)
async def get_project(
    request: Request,
    project_id: int,
    service: ProjectServiceDep,
    user: AuthUser = Depends(RequirePolicy("project.view")),
):
    return wrap_response(get_request_id(request), await service.get_project(user, project_id))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    description="Create a draft project. The creator joins it as primary member.",
)
async def create_project(
    request: Request,
    body: ParamBody[ProjectCreate],
    service: ProjectServiceDep,
    user: AuthUser = Depends(RequirePolicy("project.create")),
):
    project = await service.create_project(user, body.param)
    return wrap_response(get_request_id(request), project, status_code=status.HTTP_201_CREATED)


@router.patch(
    "/{project_id}",
    summary="Update Project",
    description="Patch the fields present in the body.",
    responses={
        400: {"description": "Cancelling without a cancel reason"},
        403: {"description": "Field or status change not allowed"},
        404: {"description": "Project not found"},
    },
)
async def update_project(
    request: Request,
    project_id: int,
    body: ParamBody[ProjectUpdate],
    service: ProjectServiceDep,
    user: AuthUser = Depends(RequirePolicy("project.edit")),
):
    project = await service.update_project(user, project_id, body.param)
    return wrap_response(get_request_id(request), project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Project",
    responses={404: {"description": "Project not found"}},
)
async def delete_project(
    project_id: int,
    service: ProjectServiceDep,
    user: AuthUser = Depends(RequirePolicy("project.delete")),
):
    await service.delete_project(user, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
