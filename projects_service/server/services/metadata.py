"""
Versioned metadata service.

Forms, plan configs and price configs share one implementation:

- a version is a sequence of revisions of the same key;
- creating a version starts it at revision 1, one above the highest version
  ever used for the key;
- editing a version appends revision ``latest + 1``. When the version already
  holds ``MAX_REVISION_NUMBER`` live revisions the oldest ones are
  soft-deleted first, so at most that many remain after the append.

Every mutation runs in one transaction and publishes a
``project.action.*`` event once committed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession

from projects_service.core.database import transaction
from projects_service.core.database.entities import Form, PlanConfig, PriceConfig, VersionedMetadataMixin
from projects_service.core.database.repositories import VersionedMetadataRepository
from projects_service.core.errors import NotFoundError
from projects_service.core.logging_config import get_logger
from projects_service.core.models.domain import AuthUser, MetadataResource
from projects_service.core.models.io import READ_SCHEMAS
from projects_service.events import BusApiClient, BusTopic
from projects_service.server.core.config import settings

logger = get_logger(__name__)

METADATA_MODELS: Dict[MetadataResource, Type[VersionedMetadataMixin]] = {
    MetadataResource.form: Form,
    MetadataResource.plan_config: PlanConfig,
    MetadataResource.price_config: PriceConfig,
}


class MetadataService:
    """Versions and revisions of one metadata resource."""

    def __init__(
        self,
        session: AsyncSession,
        bus: BusApiClient,
        resource: MetadataResource,
        max_revision_number: Optional[int] = None,
    ) -> None:
        self.session = session
        self.bus = bus
        self.resource = resource
        self.model = METADATA_MODELS[resource]
        self.repo = VersionedMetadataRepository(session, self.model)
        self.max_revision_number = max_revision_number or settings.max_revision_number

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _not_found(self, key: str, version: Optional[int] = None, revision: Optional[int] = None) -> NotFoundError:
        message = f"{self.model.resource_name} not found for key {key}"
        if version is not None:
            message += f" version {version}"
        if revision is not None:
            message += f" revision {revision}"
        return NotFoundError(message)

    def to_read(self, row: VersionedMetadataMixin) -> Dict[str, Any]:
        """Camel-cased dict of a revision, without the soft-delete columns."""
        return READ_SCHEMAS[self.resource].model_validate(row).model_dump(mode="json", by_alias=True)

    def _new_row(self, user: AuthUser, key: str, version: int, revision: int, payload: Dict[str, Any]):
        return self.model(
            key=key,
            version=version,
            revision=revision,
            created_by=user.user_id,
            updated_by=user.user_id,
            **{self.model.payload_field: payload},
        )

    async def _publish(self, topic: BusTopic, data: Dict[str, Any]) -> None:
        await self.bus.publish(topic, {"resource": self.resource.value, **data})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_latest(self, key: str) -> Dict[str, Any]:
        row = await self.repo.latest_for_key(key)
        if row is None:
            raise self._not_found(key)
        return self.to_read(row)

    async def list_versions(self, key: str) -> List[Dict[str, Any]]:
        return [self.to_read(row) for row in await self.repo.latest_of_each_version(key)]

    async def get_version(self, key: str, version: int) -> Dict[str, Any]:
        row = await self.repo.latest_for_version(key, version)
        if row is None:
            raise self._not_found(key, version)
        return self.to_read(row)

    async def list_revisions(self, key: str, version: int) -> List[Dict[str, Any]]:
        return [self.to_read(row) for row in await self.repo.list_revisions(key, version)]

    async def get_revision(self, key: str, version: int, revision: int) -> Dict[str, Any]:
        row = await self.repo.get_revision(key, version, revision)
        if row is None:
            raise self._not_found(key, version, revision)
        return self.to_read(row)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_version(self, user: AuthUser, key: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Start a new version of ``key`` at revision 1."""
        async with transaction(self.session):
            version = await self.repo.max_version(key) + 1
            row = await self.repo.create(self._new_row(user, key, version, 1, payload))
        logger.info(f"Created {self.model.resource_name} key={key} version={version}")

        data = self.to_read(row)
        await self._publish(BusTopic.PROJECT_METADATA_CREATE, data)
        return data

    async def append_revision(
        self, user: AuthUser, key: str, version: int, payload: Dict[str, Any], topic: BusTopic
    ) -> Dict[str, Any]:
        """Append revision ``latest + 1`` to an existing version.

        Raises:
            NotFoundError: When the version has no live revision
        """
        async with transaction(self.session):
            revisions = await self.repo.list_revisions(key, version)
            if not revisions:
                raise self._not_found(key, version)

            if len(revisions) >= self.max_revision_number:
                await self.repo.delete_oldest_revisions(
                    user.user_id, key, version, keep=self.max_revision_number - 1
                )

            revision = revisions[0].revision + 1
            row = await self.repo.create(self._new_row(user, key, version, revision, payload))
        logger.info(f"Appended {self.model.resource_name} key={key} version={version} revision={revision}")

        data = self.to_read(row)
        await self._publish(topic, data)
        return data

    async def update_version(self, user: AuthUser, key: str, version: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self.append_revision(user, key, version, payload, BusTopic.PROJECT_METADATA_UPDATE)

    async def create_revision(
        self, user: AuthUser, key: str, version: int, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self.append_revision(user, key, version, payload, BusTopic.PROJECT_METADATA_CREATE)

    async def delete_version(self, user: AuthUser, key: str, version: int) -> None:
        """Soft-delete every revision of a version, recording who deleted them."""
        async with transaction(self.session):
            revisions = await self.repo.list_revisions(key, version)
            if not revisions:
                raise self._not_found(key, version)
            await self.repo.soft_delete_many(revisions, user.user_id)
        logger.info(f"Deleted {self.model.resource_name} key={key} version={version}")

        await self._publish(BusTopic.PROJECT_METADATA_DELETE, {"key": key, "version": version})

    async def delete_revision(self, user: AuthUser, key: str, version: int, revision: int) -> None:
        async with transaction(self.session):
            row = await self.repo.get_revision(key, version, revision)
            if row is None:
                raise self._not_found(key, version, revision)
            await self.repo.soft_delete(row, user.user_id)
        logger.info(f"Deleted {self.model.resource_name} key={key} version={version} revision={revision}")

        await self._publish(
            BusTopic.PROJECT_METADATA_DELETE, {"key": key, "version": version, "revision": revision}
        )
