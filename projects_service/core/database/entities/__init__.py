"""
Database entity models.

This package contains all database entity models, one module per table or
per group of closely related tables.

Modules:
- projects: Projects, the aggregate root
- project_members: Project membership and project roles
- project_member_invites: Invitations to join a project
- project_attachments: Files and links attached to a project
- project_phases: Project phases and their products
- metadata: Versioned forms, plan configs and price configs
"""

from . import (
    metadata,
    project_attachments,
    project_member_invites,
    project_members,
    project_phases,
    projects,
)
from .metadata import Form, PlanConfig, PriceConfig, VersionedMetadataMixin
from .project_attachments import ProjectAttachment
from .project_member_invites import ProjectMemberInvite
from .project_members import ProjectMember
from .project_phases import PhaseProduct, ProjectPhase
from .projects import Project

__all__ = [
    "metadata",
    "project_attachments",
    "project_member_invites",
    "project_members",
    "project_phases",
    "projects",
    "Form",
    "PhaseProduct",
    "PlanConfig",
    "PriceConfig",
    "Project",
    "ProjectAttachment",
    "ProjectMember",
    "ProjectMemberInvite",
    "ProjectPhase",
    "VersionedMetadataMixin",
]
