"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware
(CORS, request context, method override), registers the exception handlers
and includes all API routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from projects_service.core.database import init_db
from projects_service.core.logging_config import get_logger, setup_logging
from projects_service.core.monitoring import initialize_logfire
from projects_service.core.models.domain import MetadataResource
from projects_service.events import close_event_bus

from .api.v4 import admin, health, metadata, project_member_invites, project_members, projects
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import MethodOverrideMiddleware, RequestContextMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup (database check) and shutdown (closing the bus client).
    """
    try:
        logger.info("Starting up Projects Service...")
        await init_db(create_tables=settings.db_create_tables)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down Projects Service...")
    await close_event_bus()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Projects Service API

    Manages projects, their members and invites, and the versioned forms,
    plan configs and price configs projects are built from.
    """,
    version=constant.SERVICE_VERSION,
    openapi_url=f"{constant.API_V4_STR}/projects/openapi.json",
    docs_url=f"{constant.API_V4_STR}/projects/docs",
    redoc_url=f"{constant.API_V4_STR}/projects/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)
setup_exception_handlers(app)

app.add_middleware(RequestContextMiddleware)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
    expose_headers=["X-Request-Id", "X-Process-Time"],
)

# Outermost, so the overridden method is what CORS and routing see.
app.add_middleware(MethodOverrideMiddleware)

PROJECTS_PREFIX = f"{constant.API_V4_STR}/projects"

# admin and metadata paths would otherwise be captured by /projects/{project_id}
app.include_router(health.router, tags=["health"])
app.include_router(admin.router, prefix=f"{PROJECTS_PREFIX}/admin")
for resource in MetadataResource:
    app.include_router(metadata.routers[resource], prefix=f"{PROJECTS_PREFIX}/metadata/{resource.value}")
app.include_router(projects.router, prefix=PROJECTS_PREFIX)
app.include_router(project_members.router, prefix=PROJECTS_PREFIX)
app.include_router(project_member_invites.router, prefix=PROJECTS_PREFIX)
