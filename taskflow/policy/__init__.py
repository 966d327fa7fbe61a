"""Authorization policy for taskflow."""

from taskflow.policy.permissions import (
    Action,
    Principal,
    PermissionResult,
    Resource,
    Role,
    can_perform,
    check_permission,
)

__all__ = [
    "Action",
    "Principal",
    "PermissionResult",
    "Resource",
    "Role",
    "can_perform",
    "check_permission",
]
