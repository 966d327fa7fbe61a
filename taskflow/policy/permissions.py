"""
Role-based permissions for task operations.

One place answers "may this user do this to that resource?" for every
route, instead of per-route role checks.
"""

from enum import Enum
from typing import Optional, Dict, Set
from pydantic import BaseModel


class Role(str, Enum):
    """Account roles."""
    ADMIN = "admin"
    TEAM_LEADER = "TeamLeader"
    MEMBER = "member"


class Action(str, Enum):
    """Operations guarded by the policy."""
    CREATE_TASK = "create_task"
    AUTO_ASSIGN = "auto_assign"
    PREVIEW_ASSIGNMENT = "preview_assignment"
    VIEW_TASK = "view_task"


class Principal(BaseModel):
    """The acting user."""
    id: str
    role: Role
    project_ids: Set[str] = set()


class Resource(BaseModel):
    """What the action targets: a project, optionally a task in it."""
    project_id: Optional[str] = None
    assigned_to: Optional[str] = None


class PermissionResult(BaseModel):
    """Result of a permission check."""
    allowed: bool
    reason: str
    checks: Dict[str, bool]


# Actions each non-admin role may take inside its own projects
ROLE_ACTIONS: Dict[Role, Set[Action]] = {
    Role.TEAM_LEADER: {
        Action.CREATE_TASK,
        Action.AUTO_ASSIGN,
        Action.PREVIEW_ASSIGNMENT,
        Action.VIEW_TASK,
    },
    Role.MEMBER: {Action.VIEW_TASK},
}


def check_permission(
    user: Principal,
    action: Action,
    resource: Optional[Resource] = None
) -> PermissionResult:
    """
    Check whether a user may perform an action on a resource.

    Rules:
    - Admins may do everything
    - Team leaders may create, auto-assign, preview and view in their projects
    - Members may view tasks in their projects or tasks assigned to them

    Returns:
        PermissionResult with allowed status and reason
    """
    if user.role == Role.ADMIN:
        return PermissionResult(allowed=True, reason="Admin", checks={"admin": True})

    checks = {}
    reasons = []
    resource = resource or Resource()

    allowed_actions = ROLE_ACTIONS.get(user.role, set())
    checks["role_allows_action"] = action in allowed_actions
    if action not in allowed_actions:
        reasons.append(f"Role {user.role.value} cannot {action.value}")

    is_assignee = resource.assigned_to is not None and resource.assigned_to == user.id
    in_project = resource.project_id is not None and resource.project_id in user.project_ids
    checks["in_project"] = in_project or (action == Action.VIEW_TASK and is_assignee)
    if not checks["in_project"]:
        reasons.append("User is not a member of this project")

    allowed = all(checks.values())
    reason = "; ".join(reasons) if reasons else "All checks passed"

    return PermissionResult(allowed=allowed, reason=reason, checks=checks)


def can_perform(
    user: Principal,
    action: Action,
    resource: Optional[Resource] = None
) -> bool:
    """True if the user may perform the action on the resource."""
    return check_permission(user, action, resource).allowed
