"""Shared fixtures for unit tests: in-memory database and a recording event bus."""

from __future__ import annotations

from typing import Any, AsyncGenerator, Dict, List, Tuple

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from projects_service.core.database import create_all, create_sessionmaker

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingBus:
    """Stands in for the bus API client and records published events."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    async def publish(self, topic, payload: Dict[str, Any]) -> bool:
        self.events.append((getattr(topic, "value", topic), payload))
        return True

    def topics(self) -> List[str]:
        return [topic for topic, _ in self.events]

    def payloads(self, topic: str) -> List[Dict[str, Any]]:
        return [payload for t, payload in self.events if t == topic]


@pytest_asyncio.fixture
async def test_engine():
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest.fixture
def bus() -> RecordingBus:
    return RecordingBus()


@pytest_asyncio.fixture
async def make_project(session: AsyncSession):
    """Persist a project (and optionally its members) directly through the repositories."""
    from projects_service.core.database.entities import Project, ProjectMember
    from projects_service.core.database.repositories import ProjectMemberRepository, ProjectRepository

    async def _make(
        name: str = "Demo project",
        owner_id: int = 40051331,
        members: Tuple[Tuple[int, str, bool], ...] = ((40051331, "customer", True),),
        **fields: Any,
    ) -> Project:
        fields.setdefault("type", "app")
        fields.setdefault("status", "draft")
        project = await ProjectRepository(session).create(
            Project(
                name=name,
                created_by=owner_id,
                updated_by=owner_id,
                last_activity_user_id=str(owner_id),
                **fields,
            )
        )
        member_repo = ProjectMemberRepository(session)
        for user_id, role, is_primary in members:
            await member_repo.create(
                ProjectMember(
                    project_id=project.id,
                    user_id=user_id,
                    role=role,
                    is_primary=is_primary,
                    created_by=owner_id,
                    updated_by=owner_id,
                )
            )
        await session.commit()
        return project

    return _make
