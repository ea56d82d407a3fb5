"""Unit tests for VersionedMetadataRepository."""

import pytest
import pytest_asyncio

from projects_service.core.database.entities import Form, PriceConfig
from projects_service.core.database.repositories import VersionedMetadataRepository


@pytest.fixture
def forms(session):
    return VersionedMetadataRepository(session, Form)


async def _add(repo, key, version, revision, config=None):
    return await repo.create(
        repo.model(
            key=key,
            version=version,
            revision=revision,
            config=config or {"v": version, "r": revision},
            created_by=1,
            updated_by=1,
        )
    )


@pytest_asyncio.fixture
async def seeded(forms, session):
    """dev: version 1 with revisions 1-2, version 2 with revisions 1-3."""
    for version, revisions in ((1, 2), (2, 3)):
        for revision in range(1, revisions + 1):
            await _add(forms, "dev", version, revision)
    await _add(forms, "other", 5, 1)
    await session.commit()
    return forms


class TestVersionedMetadataReads:
    async def test_latest_for_key(self, seeded):
        row = await seeded.latest_for_key("dev")

        assert (row.version, row.revision) == (2, 3)

    async def test_latest_for_version(self, seeded):
        row = await seeded.latest_for_version("dev", 1)

        assert (row.version, row.revision) == (1, 2)
        assert await seeded.latest_for_version("dev", 9) is None

    async def test_latest_of_each_version(self, seeded):
        rows = await seeded.latest_of_each_version("dev")

        assert [(r.version, r.revision) for r in rows] == [(2, 3), (1, 2)]

    async def test_list_revisions_newest_first(self, seeded):
        rows = await seeded.list_revisions("dev", 2)

        assert [r.revision for r in rows] == [3, 2, 1]

    async def test_get_revision(self, seeded):
        row = await seeded.get_revision("dev", 2, 2)

        assert row.get_payload() == {"v": 2, "r": 2}
        assert await seeded.get_revision("dev", 2, 9) is None

    async def test_resources_are_isolated(self, seeded, session):
        prices = VersionedMetadataRepository(session, PriceConfig)

        assert await prices.latest_for_key("dev") is None


class TestVersionedMetadataMutations:
    async def test_max_version_counts_deleted_rows(self, seeded, session):
        """A deleted version keeps its number."""
        await seeded.soft_delete_many(await seeded.list_revisions("dev", 2), 1)
        await session.commit()

        assert await seeded.latest_for_key("dev") is not None
        assert (await seeded.latest_for_key("dev")).version == 1
        assert await seeded.max_version("dev") == 2
        assert await seeded.max_version("missing") == 0

    async def test_delete_oldest_revisions(self, seeded, session):
        evicted = await seeded.delete_oldest_revisions(42, "dev", 2, keep=1)
        await session.commit()

        assert evicted == 2
        remaining = await seeded.list_revisions("dev", 2)
        assert [r.revision for r in remaining] == [3]

    async def test_delete_oldest_revisions_nothing_to_evict(self, seeded):
        assert await seeded.delete_oldest_revisions(42, "dev", 1, keep=5) == 0

    async def test_soft_delete_many_records_user(self, seeded, session):
        rows = await seeded.list_revisions("dev", 1)
        await seeded.soft_delete_many(rows, 77)
        await session.commit()

        assert all(r.deleted_by == 77 and r.deleted_at is not None for r in rows)
        assert await seeded.list_revisions("dev", 1) == []
