"""Domain models: enums and the authenticated caller shared by entities, I/O schemas, services and permission checks."""

from .auth import AuthUser
from .enums import (
    ACCEPTING_INVITE_STATUSES,
    CUSTOMER_ALLOWED_STATUSES,
    OPEN_INVITE_STATUSES,
    InviteStatus,
    MetadataResource,
    ProjectStatus,
)

__all__ = [
    "ACCEPTING_INVITE_STATUSES",
    "CUSTOMER_ALLOWED_STATUSES",
    "OPEN_INVITE_STATUSES",
    "AuthUser",
    "InviteStatus",
    "MetadataResource",
    "ProjectStatus",
]
