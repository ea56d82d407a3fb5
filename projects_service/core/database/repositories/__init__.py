"""
Database repository layer using SQLModel.

This package contains all repository classes organized by table. Each module
provides async data access operations for its SQLModel entity models.

Modules:
- base: BaseRepository interface shared by every repository
- projects: Project repository, including raw SQL search
- project_members: Project membership repository operations
- project_member_invites: Invitation repository operations
- metadata: Versioned metadata (form, plan config, price config) operations
"""

from . import (
    base,
    metadata,
    project_member_invites,
    project_members,
    projects,
)
from .base import BaseRepository
from .metadata import VersionedMetadataRepository
from .project_member_invites import ProjectMemberInviteRepository
from .project_members import ProjectMemberRepository
from .projects import ProjectRepository, ProjectSearchParameters

__all__ = [
    "base",
    "metadata",
    "project_member_invites",
    "project_members",
    "projects",
    "BaseRepository",
    "ProjectMemberInviteRepository",
    "ProjectMemberRepository",
    "ProjectRepository",
    "ProjectSearchParameters",
    "VersionedMetadataRepository",
]
