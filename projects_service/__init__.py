"""Projects Service.

A REST backend that manages projects, their members and invites, and the
versioned metadata (forms, plan configs, price configs) that drive project
creation.

High-level architecture
-----------------------

Every request follows the same path:

1. Request validation (Pydantic schemas in ``projects_service.core.models.io``).
2. Permission check (``projects_service.permissions``): a declarative table of
   permissions evaluated against the caller's Topcoder roles, M2M scopes and
   project membership.
3. Persistence through SQLModel repositories
   (``projects_service.core.database``), including raw-SQL project search.
4. Response shaping into the v4 envelope and event publication to the bus
   (``projects_service.events``).

Core subpackages
----------------

- ``projects_service.permissions``: role/scope/project-role matrices, default
  project role resolution and named route policies.
- ``projects_service.core.database``: entities, repositories and session
  management. Versioned metadata repositories implement append-only revisions
  bounded by ``MAX_REVISION_NUMBER``.
- ``projects_service.events``: outbound bus API client.
- ``projects_service.server``: FastAPI application, routers, middleware and
  exception handlers.
"""
