"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. Fields are snake_case in Python and
camelCase on the wire. These models are separate from database entities to
allow independent evolution of API contracts.

Modules:
- common: ``{"param": ...}`` request wrapper, audit columns, row camelization
- projects: Project, attachment and phase I/O models
- members: Project member I/O models
- invites: Project member invite I/O models
- metadata: Form, plan config and price config I/O models
"""

from .common import AuditRead, ParamBody, camelize
from .invites import (
    InviteFailure,
    ProjectMemberInviteCreate,
    ProjectMemberInviteCreateResult,
    ProjectMemberInviteRead,
    ProjectMemberInviteUpdate,
)
from .members import ProjectMemberCreate, ProjectMemberRead, ProjectMemberUpdate
from .metadata import (
    PARAM_SCHEMAS,
    READ_SCHEMAS,
    FormParam,
    FormRead,
    MetadataRead,
    PlanConfigParam,
    PlanConfigRead,
    PriceConfigParam,
    PriceConfigRead,
)
from .projects import (
    PhaseProductRead,
    ProjectAttachmentRead,
    ProjectCreate,
    ProjectDetailRead,
    ProjectPhaseRead,
    ProjectRead,
    ProjectUpdate,
)

__all__ = [
    "AuditRead",
    "FormParam",
    "FormRead",
    "InviteFailure",
    "MetadataRead",
    "PARAM_SCHEMAS",
    "ParamBody",
    "PhaseProductRead",
    "PlanConfigParam",
    "PlanConfigRead",
    "PriceConfigParam",
    "PriceConfigRead",
    "ProjectAttachmentRead",
    "ProjectCreate",
    "ProjectDetailRead",
    "ProjectMemberCreate",
    "ProjectMemberInviteCreate",
    "ProjectMemberInviteCreateResult",
    "ProjectMemberInviteRead",
    "ProjectMemberInviteUpdate",
    "ProjectMemberRead",
    "ProjectMemberUpdate",
    "ProjectPhaseRead",
    "ProjectRead",
    "ProjectUpdate",
    "READ_SCHEMAS",
    "camelize",
]
