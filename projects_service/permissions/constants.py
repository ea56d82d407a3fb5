"""Topcoder roles, project member roles and machine-to-machine scopes."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Topcoder (platform-wide) user roles carried in the token."""

    TOPCODER_ADMIN = "administrator"
    MANAGER = "Connect Manager"
    COPILOT = "Connect Copilot"
    CONNECT_ADMIN = "Connect Admin"
    COPILOT_MANAGER = "Connect Copilot Manager"
    TOPCODER_USER = "Topcoder User"
    TOPCODER_ACCOUNT_MANAGER = "Connect Account Manager"
    BUSINESS_DEVELOPMENT_REPRESENTATIVE = "Business Development Representative"
    PRESALES = "Presales"
    ACCOUNT_EXECUTIVE = "Account Executive"
    PROGRAM_MANAGER = "Program Manager"
    SOLUTION_ARCHITECT = "Solution Architect"
    PROJECT_MANAGER = "Project Manager"


class ProjectMemberRole(str, Enum):
    """Roles a member can hold inside one project."""

    MANAGER = "manager"
    OBSERVER = "observer"
    CUSTOMER = "customer"
    COPILOT = "copilot"
    ACCOUNT_MANAGER = "account_manager"
    PROGRAM_MANAGER = "program_manager"
    ACCOUNT_EXECUTIVE = "account_executive"
    SOLUTION_ARCHITECT = "solution_architect"
    PROJECT_MANAGER = "project_manager"


class M2MScope(str, Enum):
    """Scopes granted to machine-to-machine tokens."""

    CONNECT_PROJECT_ADMIN = "all:connect_project"
    PROJECTS_ALL = "all:projects"
    PROJECTS_READ = "read:projects"
    PROJECTS_WRITE = "write:projects"
    PROJECT_MEMBERS_ALL = "all:project-members"
    PROJECT_MEMBERS_READ = "read:project-members"
    PROJECT_MEMBERS_WRITE = "write:project-members"
    PROJECT_INVITES_ALL = "all:project-invites"
    PROJECT_INVITES_READ = "read:project-invites"
    PROJECT_INVITES_WRITE = "write:project-invites"


ADMIN_ROLES = (UserRole.CONNECT_ADMIN, UserRole.TOPCODER_ADMIN)

MANAGER_ROLES = (
    *ADMIN_ROLES,
    UserRole.MANAGER,
    UserRole.TOPCODER_ACCOUNT_MANAGER,
    UserRole.BUSINESS_DEVELOPMENT_REPRESENTATIVE,
    UserRole.PRESALES,
    UserRole.ACCOUNT_EXECUTIVE,
    UserRole.PROGRAM_MANAGER,
    UserRole.SOLUTION_ARCHITECT,
    UserRole.PROJECT_MANAGER,
)

# Project roles allowed to manage other members of the project.
PROJECT_MEMBER_MANAGER_ROLES = (
    ProjectMemberRole.MANAGER,
    ProjectMemberRole.OBSERVER,
    ProjectMemberRole.ACCOUNT_MANAGER,
    ProjectMemberRole.PROGRAM_MANAGER,
    ProjectMemberRole.ACCOUNT_EXECUTIVE,
    ProjectMemberRole.SOLUTION_ARCHITECT,
    ProjectMemberRole.PROJECT_MANAGER,
)

SCOPES_PROJECTS_READ = (M2MScope.CONNECT_PROJECT_ADMIN, M2MScope.PROJECTS_ALL, M2MScope.PROJECTS_READ)
SCOPES_PROJECTS_WRITE = (M2MScope.CONNECT_PROJECT_ADMIN, M2MScope.PROJECTS_ALL, M2MScope.PROJECTS_WRITE)
SCOPES_PROJECT_MEMBERS_READ = (
    M2MScope.CONNECT_PROJECT_ADMIN,
    M2MScope.PROJECT_MEMBERS_ALL,
    M2MScope.PROJECT_MEMBERS_READ,
)
SCOPES_PROJECT_MEMBERS_WRITE = (
    M2MScope.CONNECT_PROJECT_ADMIN,
    M2MScope.PROJECT_MEMBERS_ALL,
    M2MScope.PROJECT_MEMBERS_WRITE,
)
SCOPES_PROJECT_INVITES_READ = (
    M2MScope.CONNECT_PROJECT_ADMIN,
    M2MScope.PROJECT_INVITES_ALL,
    M2MScope.PROJECT_INVITES_READ,
)
SCOPES_PROJECT_INVITES_WRITE = (
    M2MScope.CONNECT_PROJECT_ADMIN,
    M2MScope.PROJECT_INVITES_ALL,
    M2MScope.PROJECT_INVITES_WRITE,
)
