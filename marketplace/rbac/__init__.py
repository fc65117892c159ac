from .permissions import (
    WILDCARD,
    Action,
    Permission,
    Resource,
    parse_permission,
    resolve_permission_from_request,
)
from .roles import ROLE_HIERARCHY, ROLE_PERMISSIONS, Role, get_role_permissions
from .evaluator import AccessControlEvaluator, Principal, UserPermissions
from .resources import ResourceAccessControl
from .guards import (
    RequirePermission,
    RequireRole,
    RequireRoleOrHigher,
    guard,
    guard_role,
    guard_role_or_higher,
)

__all__ = [
    "WILDCARD",
    "Action",
    "Permission",
    "Resource",
    "parse_permission",
    "resolve_permission_from_request",
    "ROLE_HIERARCHY",
    "ROLE_PERMISSIONS",
    "Role",
    "get_role_permissions",
    "AccessControlEvaluator",
    "Principal",
    "UserPermissions",
    "ResourceAccessControl",
    "RequirePermission",
    "RequireRole",
    "RequireRoleOrHigher",
    "guard",
    "guard_role",
    "guard_role_or_higher",
]
