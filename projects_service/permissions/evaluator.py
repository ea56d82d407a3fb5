"""
Permission evaluation.

A rule matches a user when ANY of these holds:

- the user is a member of the project with one of the rule's project roles
  (only checked when the project members are supplied);
- the user holds one of the rule's Topcoder roles;
- the user's token carries one of the rule's scopes.

A permission is granted when its allow rule matches and its deny rule (if any)
does not. Role names are compared case-insensitively.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from projects_service.core.models.domain import AuthUser

from .policies import (
    ALL,
    DEFAULT_PROJECT_ROLE,
    PROJECT_TO_TOPCODER_ROLES_MATRIX,
    Permission,
    PermissionRule,
    ProjectRoleRef,
)


class MemberLike(Protocol):
    user_id: int
    role: str
    is_primary: bool


def _normalize(values: Iterable[str]) -> set[str]:
    return {str(v.value if hasattr(v, "value") else v).lower() for v in values}


def _match_project_role(rule: PermissionRule, member: MemberLike) -> bool:
    if rule.project_roles is ALL:
        return True
    member_role = (member.role or "").lower()
    for entry in rule.project_roles:
        if isinstance(entry, ProjectRoleRef):
            if _normalize([entry.role]) == {member_role} and (
                entry.is_primary is None or bool(member.is_primary) == entry.is_primary
            ):
                return True
        elif _normalize([entry]) == {member_role}:
            return True
    return False


def match_permission_rule(
    rule: Optional[PermissionRule],
    user: AuthUser,
    project_members: Optional[Sequence[MemberLike]] = None,
) -> bool:
    """Check whether ``user`` matches ``rule``.

    Args:
        rule: Rule to check; an absent rule never matches
        user: Authenticated caller
        project_members: Live members of the project in question, when the
            check is about a specific project

    Returns:
        True when the user matches the rule by project role, Topcoder role or scope
    """
    if rule is None:
        return False

    if project_members is not None and rule.project_roles:
        own_memberships = [m for m in project_members if m.user_id == user.user_id]
        if any(_match_project_role(rule, m) for m in own_memberships):
            return True

    if rule.topcoder_roles:
        if rule.topcoder_roles is ALL:
            if user.roles:
                return True
        elif _normalize(rule.topcoder_roles) & _normalize(user.roles):
            return True

    if rule.scopes and _normalize(rule.scopes) & _normalize(user.scopes):
        return True

    return False


def has_permission(
    permission: Permission,
    user: AuthUser,
    project_members: Optional[Sequence[MemberLike]] = None,
) -> bool:
    """Allow rule matches and deny rule does not."""
    allowed = match_permission_rule(permission.allow_rule, user, project_members)
    denied = match_permission_rule(permission.deny_rule, user, project_members)
    return allowed and not denied


def get_default_project_role(user: AuthUser) -> Optional[str]:
    """Project role a user joins with when none is requested, or None."""
    own = _normalize(user.roles)
    for topcoder_role, project_role in DEFAULT_PROJECT_ROLE:
        if topcoder_role.lower() in own:
            return project_role.value
    return None


def is_project_role_allowed(topcoder_roles: Iterable[str], project_role: str) -> bool:
    """Whether a user with ``topcoder_roles`` may hold ``project_role`` in a project."""
    allowed = PROJECT_TO_TOPCODER_ROLES_MATRIX.get(getattr(project_role, "value", project_role))
    if allowed is None:
        return False
    return bool(_normalize(allowed) & _normalize(topcoder_roles))
