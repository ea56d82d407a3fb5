"""
API endpoints for versioned project metadata.

One router is built per resource (``form``, ``planConfig``, ``priceConfig``)
and mounted under ``/v4/projects/metadata/<resource>/{key}``. Reads need
``<resource>.view``, writes need ``<resource>.create``.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request, Response, status

from projects_service.core.models.domain import AuthUser, MetadataResource
from projects_service.core.models.io import PARAM_SCHEMAS, ParamBody
from projects_service.permissions.registry import RequirePolicy
from projects_service.server.schemas import get_request_id, wrap_response
from projects_service.server.services.deps import EventBusDep, SessionDep
from projects_service.server.services.metadata import MetadataService

KEY_MAX_LENGTH = 45


def build_metadata_router(resource: MetadataResource) -> APIRouter:
    """Routes of one metadata resource, relative to ``/{key}``."""
    router = APIRouter(tags=[f"metadata-{resource.value}"])
    param_schema = PARAM_SCHEMAS[resource]
    Body = ParamBody[param_schema]

    can_view = RequirePolicy(f"{resource.value}.view")
    can_create = RequirePolicy(f"{resource.value}.create")

    def get_service(session: SessionDep, bus: EventBusDep) -> MetadataService:
        return MetadataService(session, bus, resource)

    def payload_of(body: ParamBody) -> Dict[str, Any]:
        return body.param.model_dump(mode="json")

    @router.get("/{key}", summary=f"Get Latest {resource.value}")
    async def get_latest(
        request: Request,
        key: str = Path(max_length=KEY_MAX_LENGTH),
        service: MetadataService = Depends(get_service),
        user: AuthUser = Depends(can_view),
    ):
        return wrap_response(get_request_id(request), await service.get_latest(key))

    @router.get("/{key}/versions", summary=f"List {resource.value} Versions")
    async def list_versions(
        request: Request,
        key: str = Path(max_length=KEY_MAX_LENGTH),
        service: MetadataService = Depends(get_service),
        user: AuthUser = Depends(can_view),
    ):
        rows = await service.list_versions(key)
        return wrap_response(get_request_id(request), rows, total_count=len(rows))

    @router.post("/{key}/versions", status_code=status.HTTP_201_CREATED, summary=f"Create {resource.value} Version")
    async def create_version(
        request: Request,
        body: Body,
        key: str = Path(max_length=KEY_MAX_LENGTH),
        service: MetadataService = Depends(get_service),
        user: AuthUser = Depends(can_create),
    ):
        row = await service.create_version(user, key, payload_of(body))
        return wrap_response(get_request_id(request), row, status_code=status.HTTP_201_CREATED)

    @router.get("/{key}/versions/{version}", summary=f"Get {resource.value} Version")
    async def get_version(
        request: Request,
        key: str = Path(max_length=KEY_MAX_LENGTH),
        version: int = Path(gt=0),
        service: MetadataService = Depends(get_service),
        user: AuthUser = Depends(can_view),
    ):
        return wrap_response(get_request_id(request), await service.get_version(key, version))

    @router.patch(
        "/{key}/versions/{version}", status_code=status.HTTP_201_CREATED, summary=f"Update {resource.value} Version"
    )
    async def update_version(
        request: Request,
        body: Body,
        key: str = Path(max_length=KEY_MAX_LENGTH),
        version: int = Path(gt=0),
        service: MetadataService = Depends(get_service),
        user: AuthUser = Depends(can_create),
    ):
        row = await service.update_version(user, key, version, payload_of(body))
        return wrap_response(get_request_id(request), row, status_code=status.HTTP_201_CREATED)

    @router.delete(
        "/{key}/versions/{version}", status_code=status.HTTP_204_NO_CONTENT, summary=f"Delete {resource.value} Version"
    )
    async def delete_version(
        key: str = Path(max_length=KEY_MAX_LENGTH),
        version: int = Path(gt=0),
        service: MetadataService = Depends(get_service),
        user: AuthUser = Depends(can_create),
    ):
        await service.delete_version(user, key, version)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.get("/{key}/versions/{version}/revisions", summary=f"List {resource.value} Revisions")
    async def list_revisions(
        request: Request,
        key: str = Path(max_length=KEY_MAX_LENGTH),
        version: int = Path(gt=0),
        service: MetadataService = Depends(get_service),
        user: AuthUser = Depends(can_view),
    ):
        rows = await service.list_revisions(key, version)
        return wrap_response(get_request_id(request), rows, total_count=len(rows))

    @router.post(
        "/{key}/versions/{version}/revisions",
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {resource.value} Revision",
    )
    async def create_revision(
        request: Request,
        body: Body,
        key: str = Path(max_length=KEY_MAX_LENGTH),
        version: int = Path(gt=0),
        service: MetadataService = Depends(get_service),
        user: AuthUser = Depends(can_create),
    ):
        row = await service.create_revision(user, key, version, payload_of(body))
        return wrap_response(get_request_id(request), row, status_code=status.HTTP_201_CREATED)

    @router.get("/{key}/versions/{version}/revisions/{revision}", summary=f"Get {resource.value} Revision")
    async def get_revision(
        request: Request,
        key: str = Path(max_length=KEY_MAX_LENGTH),
        version: int = Path(gt=0),
        revision: int = Path(gt=0),
        service: MetadataService = Depends(get_service),
        user: AuthUser = Depends(can_view),
    ):
        return wrap_response(get_request_id(request), await service.get_revision(key, version, revision))

    @router.delete(
        "/{key}/versions/{version}/revisions/{revision}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Delete {resource.value} Revision",
    )
    async def delete_revision(
        key: str = Path(max_length=KEY_MAX_LENGTH),
        version: int = Path(gt=0),
        revision: int = Path(gt=0),
        service: MetadataService = Depends(get_service),
        user: AuthUser = Depends(can_create),
    ):
        await service.delete_revision(user, key, version, revision)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


routers = {resource: build_metadata_router(resource) for resource in MetadataResource}
