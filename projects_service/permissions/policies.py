"""
Declarative permission table.

Permission names say WHAT can be done, not WHO can do it. A permission is an
``allow_rule`` and an optional ``deny_rule``; each rule lists the Topcoder
roles, project roles and token scopes it matches. Evaluation lives in
``projects_service.permissions.evaluator``.

Only use a deny rule when the same restriction cannot be written as an allow
rule, and say why next to it.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional, Tuple, Union

from pydantic import ConfigDict

from projects_service.core.models.base import BaseSchema

from .constants import (
    ADMIN_ROLES,
    MANAGER_ROLES,
    PROJECT_MEMBER_MANAGER_ROLES,
    SCOPES_PROJECT_INVITES_READ,
    SCOPES_PROJECT_INVITES_WRITE,
    SCOPES_PROJECT_MEMBERS_READ,
    SCOPES_PROJECT_MEMBERS_WRITE,
    SCOPES_PROJECTS_READ,
    SCOPES_PROJECTS_WRITE,
    M2MScope,
    ProjectMemberRole,
    UserRole,
)

# Matches any user with a Topcoder role, or any member of the project.
ALL: Literal[True] = True


class ProjectRoleRef(BaseSchema):
    """A project role, optionally restricted to the primary member holding it."""

    model_config = ConfigDict(frozen=True)

    role: str
    is_primary: Optional[bool] = None


class PermissionRule(BaseSchema):
    """Who a permission applies to. Any single match is enough."""

    model_config = ConfigDict(frozen=True)

    topcoder_roles: Union[Literal[True], Tuple[str, ...]] = ()
    project_roles: Union[Literal[True], Tuple[Union[str, ProjectRoleRef], ...]] = ()
    scopes: Tuple[str, ...] = ()


class PermissionMeta(BaseSchema):
    model_config = ConfigDict(frozen=True)

    title: str
    group: str
    description: Optional[str] = None


class Permission(BaseSchema):
    """An allow rule, optionally narrowed by a deny rule."""

    model_config = ConfigDict(frozen=True)

    allow_rule: PermissionRule
    deny_rule: Optional[PermissionRule] = None
    meta: Optional[PermissionMeta] = None


def _permission(
    title: Optional[str] = None,
    group: Optional[str] = None,
    description: Optional[str] = None,
    *,
    topcoder_roles=(),
    project_roles=(),
    scopes=(),
) -> Permission:
    meta = PermissionMeta(title=title, group=group, description=description) if title else None
    return Permission(
        allow_rule=PermissionRule(
            topcoder_roles=topcoder_roles if topcoder_roles is ALL else tuple(topcoder_roles),
            project_roles=project_roles if project_roles is ALL else tuple(project_roles),
            scopes=tuple(scopes),
        ),
        meta=meta,
    )


# =====================================================================
# Project
# =====================================================================

CREATE_PROJECT = _permission("Create Project", "Project", topcoder_roles=ALL, scopes=SCOPES_PROJECTS_WRITE)

CREATE_PROJECT_AS_MANAGER = _permission(
    'Create Project as a "manager"',
    "Project",
    "The creator joins the project as manager with this permission, as customer otherwise.",
    topcoder_roles=MANAGER_ROLES,
    scopes=SCOPES_PROJECTS_WRITE,
)

READ_PROJECT = _permission(
    "Read Project", "Project", topcoder_roles=MANAGER_ROLES, project_roles=ALL, scopes=SCOPES_PROJECTS_READ
)

READ_PROJECT_ANY = _permission(
    "Read Any Project",
    "Project",
    "Read any project, even when not a member.",
    topcoder_roles=MANAGER_ROLES,
    scopes=SCOPES_PROJECTS_READ,
)

UPDATE_PROJECT = _permission(
    "Update Project",
    "Project",
    "There are additional limitations on editing some parts of the project.",
    topcoder_roles=MANAGER_ROLES,
    project_roles=ALL,
    scopes=SCOPES_PROJECTS_WRITE,
)

UPDATE_PROJECT_DIRECT_PROJECT_ID = _permission(
    'Update Project property "directProjectId"',
    "Project",
    topcoder_roles=(UserRole.MANAGER, UserRole.TOPCODER_ADMIN),
    scopes=SCOPES_PROJECTS_WRITE,
)

DELETE_PROJECT = _permission(
    "Delete Project",
    "Project",
    "Has a different set of permissions than update.",
    topcoder_roles=MANAGER_ROLES,
    project_roles=(
        # primary customer, usually the one who created the project
        ProjectRoleRef(role=ProjectMemberRole.CUSTOMER, is_primary=True),
        ProjectMemberRole.MANAGER,
        ProjectMemberRole.PROGRAM_MANAGER,
        ProjectMemberRole.PROJECT_MANAGER,
        ProjectMemberRole.SOLUTION_ARCHITECT,
    ),
    scopes=SCOPES_PROJECTS_WRITE,
)

MANAGE_PROJECTS_ADMIN = _permission(
    "Manage Projects (admin)",
    "Project",
    "Bulk read access used to rebuild search indexes.",
    topcoder_roles=ADMIN_ROLES,
    scopes=(M2MScope.CONNECT_PROJECT_ADMIN, M2MScope.PROJECTS_ALL),
)

# =====================================================================
# Project Member
# =====================================================================

READ_PROJECT_MEMBER = _permission(
    "Read Project Member",
    "Project Member",
    topcoder_roles=MANAGER_ROLES,
    project_roles=ALL,
    scopes=SCOPES_PROJECT_MEMBERS_READ,
)

READ_PROJECT_MEMBER_DETAILS = _permission(
    "Read Project Member Details",
    "Project Member",
    "Who can see user details (PII) like email.",
    topcoder_roles=(UserRole.TOPCODER_ADMIN,),
    scopes=SCOPES_PROJECT_MEMBERS_READ,
)

CREATE_PROJECT_MEMBER = _permission(
    "Create Project Member",
    "Project Member",
    topcoder_roles=MANAGER_ROLES,
    project_roles=ALL,
    scopes=SCOPES_PROJECT_MEMBERS_WRITE,
)

CREATE_PROJECT_MEMBER_OWN = _permission(
    "Create Project Member (own)",
    "Project Member",
    "Who can join a project they are not a member of yet.",
    topcoder_roles=(*MANAGER_ROLES, UserRole.COPILOT),
    scopes=SCOPES_PROJECT_MEMBERS_WRITE,
)

CREATE_PROJECT_MEMBER_FOR_OTHERS = _permission(
    "Create Project Member (for other users)",
    "Project Member",
    "Who can add other users as project members.",
    topcoder_roles=ADMIN_ROLES,
    scopes=SCOPES_PROJECT_MEMBERS_WRITE,
)

UPDATE_PROJECT_MEMBER = _permission(
    "Update Project Member",
    "Project Member",
    topcoder_roles=MANAGER_ROLES,
    project_roles=ALL,
    scopes=SCOPES_PROJECT_MEMBERS_WRITE,
)

UPDATE_PROJECT_MEMBER_NON_CUSTOMER = _permission(
    "Update Project Member (non-customer)",
    "Project Member",
    'Who can update project members with a non "customer" role.',
    topcoder_roles=MANAGER_ROLES,
    scopes=SCOPES_PROJECT_MEMBERS_WRITE,
)

UPDATE_PROJECT_MEMBER_TO_COPILOT = _permission(
    "Update Project Member (to copilot)",
    "Project Member",
    'Who can update a project member role to "copilot".',
    topcoder_roles=(*ADMIN_ROLES, UserRole.COPILOT_MANAGER),
    scopes=SCOPES_PROJECT_MEMBERS_WRITE,
)

DELETE_PROJECT_MEMBER = _permission(
    "Delete Project Member",
    "Project Member",
    topcoder_roles=MANAGER_ROLES,
    project_roles=ALL,
    scopes=SCOPES_PROJECT_MEMBERS_WRITE,
)

DELETE_PROJECT_MEMBER_NON_CUSTOMER = _permission(
    "Delete Project Member (non-customer)",
    "Project Member",
    'Who can delete project members with a non "customer" role.',
    topcoder_roles=MANAGER_ROLES,
    scopes=SCOPES_PROJECT_MEMBERS_WRITE,
)

# =====================================================================
# Defined by WHO: groups of users
# =====================================================================

ROLES_COPILOT_AND_ABOVE = _permission(
    topcoder_roles=ADMIN_ROLES,
    project_roles=(
        ProjectMemberRole.PROGRAM_MANAGER,
        ProjectMemberRole.SOLUTION_ARCHITECT,
        ProjectMemberRole.PROJECT_MANAGER,
        ProjectMemberRole.MANAGER,
        ProjectMemberRole.COPILOT,
    ),
)

# =====================================================================
# Project Member Invite
# =====================================================================

READ_PROJECT_INVITE_NOT_OWN = _permission(
    "Read Project Invites (not own)",
    "Project Invite",
    topcoder_roles=MANAGER_ROLES,
    project_roles=ALL,
    scopes=SCOPES_PROJECT_INVITES_READ,
)

CREATE_PROJECT_INVITE = _permission(
    "Create Project Invite",
    "Project Invite",
    topcoder_roles=MANAGER_ROLES,
    project_roles=ALL,
    scopes=SCOPES_PROJECT_INVITES_WRITE,
)

UPDATE_NOT_OWN_INVITE = _permission(topcoder_roles=(UserRole.TOPCODER_ADMIN, UserRole.CONNECT_ADMIN))

UPDATE_REQUESTED_INVITE = _permission(
    topcoder_roles=(UserRole.TOPCODER_ADMIN, UserRole.CONNECT_ADMIN, UserRole.COPILOT_MANAGER)
)

DELETE_CUSTOMER_INVITE = _permission(
    topcoder_roles=(UserRole.TOPCODER_ADMIN, UserRole.CONNECT_ADMIN),
    project_roles=ALL,
)

DELETE_NON_CUSTOMER_INVITE = _permission(
    topcoder_roles=(UserRole.TOPCODER_ADMIN, UserRole.CONNECT_ADMIN),
    project_roles=PROJECT_MEMBER_MANAGER_ROLES,
)

DELETE_REQUESTED_INVITE = _permission(
    topcoder_roles=(UserRole.TOPCODER_ADMIN, UserRole.CONNECT_ADMIN, UserRole.COPILOT_MANAGER)
)

# =====================================================================
# Versioned metadata (forms, plan configs, price configs)
# =====================================================================

MANAGE_PROJECT_METADATA = _permission(
    "Manage Project Metadata",
    "Metadata",
    "Create, revise and delete forms, plan configs and price configs.",
    topcoder_roles=ADMIN_ROLES,
    scopes=SCOPES_PROJECTS_WRITE,
)

READ_PROJECT_METADATA = _permission(
    "Read Project Metadata", "Metadata", topcoder_roles=ALL, scopes=SCOPES_PROJECTS_READ
)


PERMISSIONS: Dict[str, Permission] = {
    name: value for name, value in dict(globals()).items() if isinstance(value, Permission) and name.isupper()
}

# Which Topcoder roles may hold each project role, keyed by project role value.
_ROLES_MATRIX: Dict[ProjectMemberRole, Tuple[str, ...]] = {
    ProjectMemberRole.MANAGER: (UserRole.TOPCODER_ADMIN, UserRole.CONNECT_ADMIN, UserRole.MANAGER),
    ProjectMemberRole.SOLUTION_ARCHITECT: (UserRole.SOLUTION_ARCHITECT,),
    ProjectMemberRole.PROJECT_MANAGER: (UserRole.PROJECT_MANAGER,),
    ProjectMemberRole.PROGRAM_MANAGER: (UserRole.PROGRAM_MANAGER,),
    ProjectMemberRole.ACCOUNT_EXECUTIVE: (UserRole.ACCOUNT_EXECUTIVE,),
    ProjectMemberRole.ACCOUNT_MANAGER: (
        UserRole.MANAGER,
        UserRole.TOPCODER_ACCOUNT_MANAGER,
        UserRole.BUSINESS_DEVELOPMENT_REPRESENTATIVE,
        UserRole.PRESALES,
        UserRole.ACCOUNT_EXECUTIVE,
        UserRole.PROGRAM_MANAGER,
        UserRole.SOLUTION_ARCHITECT,
        UserRole.PROJECT_MANAGER,
    ),
    ProjectMemberRole.COPILOT: (UserRole.COPILOT,),
    ProjectMemberRole.CUSTOMER: tuple(UserRole),
}
PROJECT_TO_TOPCODER_ROLES_MATRIX: Dict[str, Tuple[str, ...]] = {role.value: roles for role, roles in _ROLES_MATRIX.items()}

# Default project role by Topcoder role. Order matters: the first entry whose
# Topcoder role the user holds wins. A copilot defaults to account_manager,
# which the roles matrix does not allow them, so they must pass a role to join.
DEFAULT_PROJECT_ROLE: List[Tuple[str, str]] = [
    (UserRole.MANAGER, ProjectMemberRole.MANAGER),
    (UserRole.CONNECT_ADMIN, ProjectMemberRole.MANAGER),
    (UserRole.TOPCODER_ADMIN, ProjectMemberRole.MANAGER),
    (UserRole.TOPCODER_ACCOUNT_MANAGER, ProjectMemberRole.ACCOUNT_MANAGER),
    (UserRole.BUSINESS_DEVELOPMENT_REPRESENTATIVE, ProjectMemberRole.ACCOUNT_MANAGER),
    (UserRole.PRESALES, ProjectMemberRole.ACCOUNT_MANAGER),
    (UserRole.COPILOT, ProjectMemberRole.ACCOUNT_MANAGER),
    (UserRole.ACCOUNT_EXECUTIVE, ProjectMemberRole.ACCOUNT_EXECUTIVE),
    (UserRole.PROGRAM_MANAGER, ProjectMemberRole.PROGRAM_MANAGER),
    (UserRole.SOLUTION_ARCHITECT, ProjectMemberRole.SOLUTION_ARCHITECT),
    (UserRole.PROJECT_MANAGER, ProjectMemberRole.PROJECT_MANAGER),
    (UserRole.TOPCODER_USER, ProjectMemberRole.CUSTOMER),
]
