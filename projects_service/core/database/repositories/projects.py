"""
Project repository.

Besides the standard CRUD operations this module provides:

- ``search_text``: filtered, sorted and paginated project search executed as
  raw SQL with bound parameters (one count query, one page query);
- ``get_direct_project_id``: single-column lookup;
- ``find_project_range``: projects in an id range with their phases and the
  phases' products, used to rebuild search indexes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import Integer, String, bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from projects_service.core.logging_config import get_logger

from ..entities.project_phases import PhaseProduct, ProjectPhase
from ..entities.projects import Project
from .base import BaseRepository

logger = get_logger(__name__)

# API sort field -> projects column
SORTABLE_FIELDS: Dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "lastActivityAt": "last_activity_at",
    "id": "id",
    "status": "status",
    "name": "name",
    "type": "type",
}

SORT_DIRECTIONS = ("asc", "desc")

# Columns returned by search when the caller does not narrow them down.
DEFAULT_SEARCH_ATTRIBUTES: Tuple[str, ...] = tuple(
    column.name for column in Project.__table__.columns if column.name not in ("deleted_at", "deleted_by")
)


@dataclass
class ProjectSearchParameters:
    """Parameters of a project search.

    ``filters`` accepts ``id`` (int or list of ints), ``status`` (str or list),
    ``type``, ``keyword``, and ``user_id`` / ``email`` to restrict results to
    projects the user is a member of or invited to.
    """

    filters: Dict[str, Any] = field(default_factory=dict)
    order: Tuple[str, str] = ("createdAt", "desc")
    limit: int = 20
    offset: int = 0
    attributes: Sequence[str] = DEFAULT_SEARCH_ATTRIBUTES


class ProjectRepository(BaseRepository[Project]):
    """Repository for project data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Project)

    async def get_direct_project_id(self, project_id: int) -> Optional[int]:
        """Return the direct project id of a live project, or None."""
        stmt = select(Project.direct_project_id).where(Project.id == project_id, Project.deleted_at.is_(None))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def search_text(self, parameters: ProjectSearchParameters) -> Tuple[List[Dict[str, Any]], int]:
        """Search projects with raw SQL.

        Args:
            parameters: Filters, order, pagination and selected attributes

        Returns:
            The page of project rows (as dicts keyed by column name) and the
            total number of matching projects
        """
        where, binds, typed = self._build_where(parameters.filters)

        sort_field, direction = parameters.order
        column = SORTABLE_FIELDS.get(sort_field)
        if column is None or direction.lower() not in SORT_DIRECTIONS:
            raise ValueError(f"Unsupported sort order: {sort_field} {direction}")

        unknown = [name for name in parameters.attributes if name not in Project.__table__.columns]
        if unknown:
            raise ValueError(f"Unknown project attributes: {', '.join(unknown)}")

        where_sql = " AND ".join(where)
        count_sql = f"SELECT COUNT(1) FROM projects AS projects WHERE {where_sql}"
        logger.debug(f"Project search count query: {count_sql}")
        count_stmt = text(count_sql).bindparams(*typed)
        total = (await self.session.execute(count_stmt, binds)).scalar_one()

        attributes_sql = ", ".join(f"projects.{name}" for name in parameters.attributes)
        page_sql = (
            f"SELECT {attributes_sql} FROM projects AS projects WHERE {where_sql} "
            f"ORDER BY projects.{column} {direction.upper()}, projects.id ASC LIMIT :limit OFFSET :offset"
        )
        logger.debug(f"Project search page query: {page_sql}")
        page_stmt = (
            text(page_sql)
            .bindparams(*typed)
            .columns(*[Project.__table__.c[name] for name in parameters.attributes])
        )
        page_binds = {**binds, "limit": parameters.limit, "offset": parameters.offset}
        rows = (await self.session.execute(page_stmt, page_binds)).mappings().all()
        return [dict(row) for row in rows], int(total)

    @staticmethod
    def _build_where(filters: Dict[str, Any]) -> Tuple[List[str], Dict[str, Any], List[Any]]:
        where = ["projects.deleted_at IS NULL"]
        binds: Dict[str, Any] = {}
        typed: List[Any] = []

        if filters.get("id") is not None:
            ids = filters["id"]
            if isinstance(ids, (list, tuple, set)):
                # An empty IN () is invalid SQL; -1 never matches a project id.
                binds["ids"] = list(ids) or [-1]
                typed.append(bindparam("ids", expanding=True))
                where.append("projects.id IN :ids")
            else:
                binds["id"] = int(ids)
                where.append("projects.id = :id")

        if filters.get("status") is not None:
            statuses = filters["status"]
            if isinstance(statuses, (list, tuple, set)):
                binds["statuses"] = list(statuses) or [""]
                typed.append(bindparam("statuses", expanding=True))
                where.append("projects.status IN :statuses")
            else:
                binds["status"] = statuses
                where.append("projects.status = :status")

        if filters.get("type") is not None:
            binds["type"] = filters["type"]
            where.append("projects.type = :type")

        if filters.get("keyword"):
            binds["keyword"] = f"%{filters['keyword'].lower()}%"
            where.append(
                "(lower(projects.name) LIKE :keyword OR lower(coalesce(projects.description, '')) LIKE :keyword)"
            )

        if filters.get("user_id") is not None or filters.get("email"):
            binds["user_id"] = filters.get("user_id")
            binds["email"] = filters.get("email")
            typed.extend([bindparam("user_id", type_=Integer()), bindparam("email", type_=String())])
            where.append(
                "projects.id IN ("
                "SELECT members.project_id FROM project_members AS members "
                "WHERE members.user_id = :user_id AND members.deleted_at IS NULL "
                "UNION "
                "SELECT invites.project_id FROM project_member_invites AS invites "
                "WHERE (invites.user_id = :user_id OR lower(invites.email) = lower(:email)) "
                "AND invites.deleted_at IS NULL)"
            )

        return where, binds, typed

    async def find_project_range(
        self, start_id: int, end_id: int, fields: Optional[Sequence[str]] = None
    ) -> List[Dict[str, Any]]:
        """Load projects with ``start_id <= id <= end_id`` with phases and products.

        Args:
            start_id: First project id of the range
            end_id: Last project id of the range
            fields: Optional project fields to keep; all fields when omitted

        Returns:
            Project dicts, each with a ``phases`` list whose items carry a
            ``products`` list. Phases are ordered by start date.
        """
        stmt = (
            self._live()
            .where(Project.id >= start_id, Project.id <= end_id)
            .order_by(Project.id)
        )
        projects = list((await self.session.execute(stmt)).scalars().all())
        if not projects:
            return []

        project_ids = [p.id for p in projects]
        phase_stmt = (
            select(ProjectPhase)
            .where(ProjectPhase.project_id.in_(project_ids), ProjectPhase.deleted_at.is_(None))
            .order_by(ProjectPhase.start_date, ProjectPhase.id)
        )
        phases = list((await self.session.execute(phase_stmt)).scalars().all())

        products_by_phase: Dict[int, List[Dict[str, Any]]] = {}
        if phases:
            product_stmt = (
                select(PhaseProduct)
                .where(PhaseProduct.phase_id.in_([ph.id for ph in phases]), PhaseProduct.deleted_at.is_(None))
                .order_by(PhaseProduct.id)
            )
            for product in (await self.session.execute(product_stmt)).scalars().all():
                products_by_phase.setdefault(product.phase_id, []).append(product.model_dump())

        phases_by_project: Dict[int, List[Dict[str, Any]]] = {}
        for phase in phases:
            phase_data = phase.model_dump()
            phase_data["products"] = products_by_phase.get(phase.id, [])
            phases_by_project.setdefault(phase.project_id, []).append(phase_data)

        result = []
        for project in projects:
            data = project.model_dump(include=set(fields) if fields else None)
            data["phases"] = phases_by_project.get(project.id, [])
            result.append(data)
        return result
