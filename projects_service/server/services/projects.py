"""
Project service.

Business rules applied on top of the project repository:

- projects are created as ``draft`` and the creator joins as primary member
  (manager or customer depending on their permissions);
- only some callers may change ``directProjectId`` or move a project beyond
  the customer statuses, and cancelling requires a reason;
- deletes are soft.

Events are published once the transaction is committed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from projects_service.core.database import transaction
from projects_service.core.database.entities import (
    PhaseProduct,
    Project,
    ProjectAttachment,
    ProjectMember,
    ProjectPhase,
)
from projects_service.core.database.repositories import (
    ProjectMemberInviteRepository,
    ProjectMemberRepository,
    ProjectRepository,
    ProjectSearchParameters,
)
from projects_service.core.errors import BadRequestError, ForbiddenError, NotFoundError
from projects_service.core.logging_config import get_logger
from projects_service.core.models.domain import (
    CUSTOMER_ALLOWED_STATUSES,
    OPEN_INVITE_STATUSES,
    AuthUser,
    ProjectStatus,
)
from projects_service.core.models.io import (
    PhaseProductRead,
    ProjectAttachmentRead,
    ProjectCreate,
    ProjectDetailRead,
    ProjectMemberInviteRead,
    ProjectMemberRead,
    ProjectPhaseRead,
    ProjectRead,
    ProjectUpdate,
    camelize,
)
from projects_service.events import BusApiClient, BusTopic
from projects_service.permissions import ProjectMemberRole, has_permission
from projects_service.permissions import policies as P

logger = get_logger(__name__)


def dump(model) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


class ProjectService:
    """Project use cases."""

    def __init__(self, session: AsyncSession, bus: BusApiClient) -> None:
        self.session = session
        self.bus = bus
        self.projects = ProjectRepository(session)
        self.members = ProjectMemberRepository(session)
        self.invites = ProjectMemberInviteRepository(session)

    async def get_or_404(self, project_id: int) -> Project:
        project = await self.projects.get_by_id(project_id)
        if project is None:
            raise NotFoundError(f"project not found for id {project_id}")
        return project

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_projects(
        self,
        user: AuthUser,
        filters: Dict[str, Any],
        order: Tuple[str, str],
        limit: int,
        offset: int,
        fields: Optional[Sequence[str]] = None,
        member_only: bool = False,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Search projects visible to ``user``.

        Callers without READ_PROJECT_ANY, or asking for ``memberOnly``, only
        see projects they are a member of or invited to.
        """
        filters = dict(filters)
        if member_only or not has_permission(P.READ_PROJECT_ANY, user):
            filters["user_id"] = user.user_id
            filters["email"] = user.email

        params = ProjectSearchParameters(filters=filters, order=order, limit=limit, offset=offset)
        if fields:
            params.attributes = list(dict.fromkeys(["id", *fields]))
        try:
            rows, total = await self.projects.search_text(params)
        except ValueError as e:
            raise BadRequestError(str(e))
        return [camelize(row) for row in rows], total

    async def get_project(self, user: AuthUser, project_id: int) -> Dict[str, Any]:
        """A project with its members, open invites, visible attachments and phases."""
        project = await self.get_or_404(project_id)
        members = await self.members.list_by_project(project_id)
        invites = await self.invites.list_by_project(project_id, statuses=OPEN_INVITE_STATUSES)
        attachments = await self._visible_attachments(user, project_id)
        phases = await self._phases_with_products(project_id)

        detail = ProjectDetailRead.model_validate(project).model_copy(
            update={
                "members": [ProjectMemberRead.model_validate(m) for m in members],
                "invites": [ProjectMemberInviteRead.model_validate(i) for i in invites],
                "attachments": [ProjectAttachmentRead.model_validate(a) for a in attachments],
                "phases": phases,
            }
        )
        return dump(detail)

    async def _visible_attachments(self, user: AuthUser, project_id: int) -> List[ProjectAttachment]:
        stmt = (
            select(ProjectAttachment)
            .where(ProjectAttachment.project_id == project_id, ProjectAttachment.deleted_at.is_(None))
            .order_by(ProjectAttachment.id)
        )
        attachments = list((await self.session.execute(stmt)).scalars().all())
        if has_permission(P.READ_PROJECT_ANY, user):
            return attachments
        # Attachments restricted to some users are hidden from everybody else except their uploader.
        return [
            a
            for a in attachments
            if not a.allowed_users or user.user_id in a.allowed_users or a.created_by == user.user_id
        ]

    async def _phases_with_products(self, project_id: int) -> List[ProjectPhaseRead]:
        phase_stmt = (
            select(ProjectPhase)
            .where(ProjectPhase.project_id == project_id, ProjectPhase.deleted_at.is_(None))
            .order_by(ProjectPhase.start_date, ProjectPhase.id)
        )
        phases = list((await self.session.execute(phase_stmt)).scalars().all())
        if not phases:
            return []

        product_stmt = (
            select(PhaseProduct)
            .where(PhaseProduct.project_id == project_id, PhaseProduct.deleted_at.is_(None))
            .order_by(PhaseProduct.id)
        )
        products: Dict[int, List[PhaseProduct]] = {}
        for product in (await self.session.execute(product_stmt)).scalars().all():
            products.setdefault(product.phase_id, []).append(product)

        return [
            ProjectPhaseRead.model_validate(phase).model_copy(
                update={"products": [PhaseProductRead.model_validate(p) for p in products.get(phase.id, [])]}
            )
            for phase in phases
        ]

    async def find_project_range(
        self, start_id: int, end_id: int, fields: Optional[Sequence[str]] = None
    ) -> List[Dict[str, Any]]:
        if start_id > end_id:
            raise BadRequestError("startId must not be greater than endId")
        projects = await self.projects.find_project_range(start_id, end_id, fields)
        return [self._camelize_range_row(p) for p in projects]

    @staticmethod
    def _camelize_range_row(project: Dict[str, Any]) -> Dict[str, Any]:
        phases = project.pop("phases", [])
        data = camelize(project)
        data["phases"] = []
        for phase in phases:
            products = phase.pop("products", [])
            phase_data = camelize(phase)
            phase_data["products"] = [camelize(p) for p in products]
            data["phases"].append(phase_data)
        return data

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_project(self, user: AuthUser, data: ProjectCreate) -> Dict[str, Any]:
        """Create a draft project; a human creator becomes its primary member."""
        async with transaction(self.session):
            project = Project(
                **data.model_dump(),
                status=ProjectStatus.draft.value,
                created_by=user.user_id,
                updated_by=user.user_id,
                last_activity_user_id=str(user.user_id),
            )
            project = await self.projects.create(project)

            if not user.is_machine:
                role = (
                    ProjectMemberRole.MANAGER
                    if has_permission(P.CREATE_PROJECT_AS_MANAGER, user)
                    else ProjectMemberRole.CUSTOMER
                )
                await self.members.create(
                    ProjectMember(
                        project_id=project.id,
                        user_id=user.user_id,
                        role=role.value,
                        is_primary=True,
                        created_by=user.user_id,
                        updated_by=user.user_id,
                    )
                )
        logger.info(f"Project {project.id} created by user {user.user_id}")

        result = await self.get_project(user, project.id)
        await self.bus.publish(BusTopic.PROJECT_DRAFT_CREATED, result)
        return result

    async def update_project(self, user: AuthUser, project_id: int, data: ProjectUpdate) -> Dict[str, Any]:
        """Patch a project.

        Raises:
            ForbiddenError: directProjectId or status change not allowed for the caller
            BadRequestError: cancelling without a cancel reason
        """
        changes = data.model_dump(exclude_unset=True)

        async with transaction(self.session):
            project = await self.get_or_404(project_id)
            original = dump(ProjectRead.model_validate(project))
            members = await self.members.list_by_project(project_id)

            if (
                "direct_project_id" in changes
                and changes["direct_project_id"] != project.direct_project_id
                and not has_permission(P.UPDATE_PROJECT_DIRECT_PROJECT_ID, user, members)
            ):
                raise ForbiddenError("You do not have permission to update 'directProjectId' property")

            status = changes.get("status")
            if status is not None:
                status = ProjectStatus(status)
                changes["status"] = status.value
                if status == ProjectStatus.cancelled and not changes.get("cancel_reason"):
                    raise BadRequestError("Cancel reason is required when cancelling a project")
                if (
                    status.value != project.status
                    and status not in CUSTOMER_ALLOWED_STATUSES
                    and not has_permission(P.ROLES_COPILOT_AND_ABOVE, user, members)
                ):
                    raise ForbiddenError("You are not allowed to update project status")

            for field, value in changes.items():
                setattr(project, field, value)
            project.updated_by = user.user_id
            project.touch(user.user_id)
            project = await self.projects.update(project)
        logger.info(f"Project {project_id} updated by user {user.user_id}: {sorted(changes)}")

        updated = dump(ProjectRead.model_validate(project))
        await self.bus.publish(BusTopic.PROJECT_UPDATED, {"original": original, "updated": updated})
        return updated

    async def delete_project(self, user: AuthUser, project_id: int) -> None:
        async with transaction(self.session):
            project = await self.get_or_404(project_id)
            await self.projects.soft_delete(project, user.user_id)
        logger.info(f"Project {project_id} deleted by user {user.user_id}")

        await self.bus.publish(
            BusTopic.PROJECT_DELETED, {"id": project_id, "directProjectId": project.direct_project_id}
        )
