"""
Role, scope and project-role based permissions.

Modules:
- constants: Topcoder roles, project member roles and M2M scopes
- policies: The declarative permission table, role matrix and default roles
- evaluator: Rule matching and default project role resolution
- registry: Named policies and the ``RequirePolicy`` route dependency
"""

from .constants import M2MScope, ProjectMemberRole, UserRole
from .evaluator import (
    get_default_project_role,
    has_permission,
    is_project_role_allowed,
    match_permission_rule,
)
from .policies import (
    ALL,
    DEFAULT_PROJECT_ROLE,
    PERMISSIONS,
    PROJECT_TO_TOPCODER_ROLES_MATRIX,
    Permission,
    PermissionRule,
    ProjectRoleRef,
)

__all__ = [
    "ALL",
    "DEFAULT_PROJECT_ROLE",
    "PERMISSIONS",
    "PROJECT_TO_TOPCODER_ROLES_MATRIX",
    "M2MScope",
    "Permission",
    "PermissionRule",
    "ProjectMemberRole",
    "ProjectRoleRef",
    "UserRole",
    "get_default_project_role",
    "has_permission",
    "is_project_role_allowed",
    "match_permission_rule",
]
