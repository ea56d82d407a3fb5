"""
Versioned metadata repository.

One repository class serves forms, plan configs and price configs; it is
bound to the entity model at construction time. Rows are append-only
revisions identified by ``(key, version, revision)``.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from projects_service.core.logging_config import get_logger

from ..entities.metadata import VersionedMetadataMixin
from .base import BaseRepository

logger = get_logger(__name__)

MetadataType = TypeVar("MetadataType", bound=VersionedMetadataMixin)


class VersionedMetadataRepository(BaseRepository[MetadataType]):
    """Repository for versioned metadata (Form, PlanConfig, PriceConfig)."""

    def __init__(self, session: AsyncSession, model: Type[MetadataType]) -> None:
        super().__init__(session, model)

    def _for_key(self, key: str, version: Optional[int] = None):
        stmt = self._live().where(self.model.key == key)
        if version is not None:
            stmt = stmt.where(self.model.version == version)
        return stmt

    async def latest_for_key(self, key: str) -> Optional[MetadataType]:
        """Latest revision of the highest live version of ``key``."""
        stmt = self._for_key(key).order_by(self.model.version.desc(), self.model.revision.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def latest_for_version(self, key: str, version: int) -> Optional[MetadataType]:
        """Latest revision of one version of ``key``."""
        stmt = self._for_key(key, version).order_by(self.model.revision.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def latest_of_each_version(self, key: str) -> List[MetadataType]:
        """Latest revision of every live version of ``key``, highest version first."""
        stmt = self._for_key(key).order_by(self.model.version.desc(), self.model.revision.desc())
        latest: Dict[int, MetadataType] = {}
        for row in (await self.session.execute(stmt)).scalars().all():
            latest.setdefault(row.version, row)
        return list(latest.values())

    async def list_revisions(self, key: str, version: int) -> List[MetadataType]:
        """All live revisions of a version, newest first."""
        stmt = self._for_key(key, version).order_by(self.model.revision.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_revision(self, key: str, version: int, revision: int) -> Optional[MetadataType]:
        stmt = self._for_key(key, version).where(self.model.revision == revision)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def max_version(self, key: str) -> int:
        """Highest version ever used for ``key``, soft-deleted rows included; 0 when none.

        Deleted versions keep their number so a ``(key, version, revision)``
        triple is never reused.
        """
        stmt = select(func.max(self.model.version)).where(self.model.key == key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() or 0

    async def delete_oldest_revisions(self, user_id: int, key: str, version: int, keep: int) -> int:
        """Soft-delete the oldest live revisions of a version until ``keep`` remain.

        Args:
            user_id: User recorded as ``deleted_by``
            key: Metadata key
            version: Metadata version
            keep: Number of newest revisions to keep

        Returns:
            Number of revisions deleted
        """
        revisions = await self.list_revisions(key, version)
        evicted = revisions[max(keep, 0):]
        for row in evicted:
            row.mark_deleted(user_id)
            self.session.add(row)
        if evicted:
            await self.session.flush()
            logger.info(
                f"Evicted {len(evicted)} oldest {self.model.resource_name} revision(s) "
                f"for key={key} version={version}"
            )
        return len(evicted)

    async def soft_delete_many(self, rows: List[MetadataType], user_id: int) -> None:
        """Soft-delete several rows, recording ``deleted_by`` on each."""
        for row in rows:
            row.mark_deleted(user_id)
            self.session.add(row)
        await self.session.flush()
