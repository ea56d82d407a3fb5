"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from projects_service.core.logging_config import get_logger
from projects_service.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

# Create global engine and session factory
engine = create_engine(settings.database_url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db(create_tables: bool = False) -> None:
    """
    Initialize the database.

    In production, Alembic migrations handle all DDL and this only verifies the
    engine. Local development can pass ``create_tables=True`` to create the
    schema straight from the ORM metadata.
    """
    if create_tables:
        await create_all(engine)
        logger.info("Database tables created from ORM metadata")
        return

    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Database connection verified")
