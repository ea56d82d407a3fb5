"""Business services used by the v4 API routes."""

from .invites import ProjectMemberInviteService
from .members import ProjectMemberService
from .metadata import METADATA_MODELS, MetadataService
from .projects import ProjectService

__all__ = [
    "METADATA_MODELS",
    "MetadataService",
    "ProjectMemberInviteService",
    "ProjectMemberService",
    "ProjectService",
]
