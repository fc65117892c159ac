"""
Permission tokens.

Every grantable capability is a ``resource:action`` token drawn from the
closed ``Permission`` enum. ``WILDCARD`` is the single token outside it.
"""

from enum import Enum
from typing import Union

from starlette.requests import Request

from marketplace.utils.exceptions import ConfigurationError


WILDCARD = "*"


class Resource(str, Enum):
    USERS = "users"
    VENDORS = "vendors"
    PRODUCTS = "products"
    ORDERS = "orders"
    PAYMENTS = "payments"
    SETTINGS = "settings"
    ANALYTICS = "analytics"
    SYSTEM = "system"


class Action(str, Enum):
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    APPROVE = "approve"
    MANAGE = "manage"


class Permission(str, Enum):
    # User management
    USERS_READ = "users:read"
    USERS_WRITE = "users:write"
    USERS_DELETE = "users:delete"
    USERS_MANAGE = "users:manage"

    # Vendor management
    VENDORS_READ = "vendors:read"
    VENDORS_WRITE = "vendors:write"
    VENDORS_APPROVE = "vendors:approve"
    VENDORS_MANAGE = "vendors:manage"

    # Product management
    PRODUCTS_READ = "products:read"
    PRODUCTS_WRITE = "products:write"
    PRODUCTS_DELETE = "products:delete"
    PRODUCTS_APPROVE = "products:approve"
    PRODUCTS_MANAGE = "products:manage"

    # Order management
    ORDERS_READ = "orders:read"
    ORDERS_WRITE = "orders:write"
    ORDERS_MANAGE = "orders:manage"

    # Payment management
    PAYMENTS_READ = "payments:read"
    PAYMENTS_WRITE = "payments:write"
    PAYMENTS_MANAGE = "payments:manage"

    # Settings management
    SETTINGS_READ = "settings:read"
    SETTINGS_WRITE = "settings:write"
    SETTINGS_MANAGE = "settings:manage"

    # Analytics
    ANALYTICS_READ = "analytics:read"

    # System
    SYSTEM_MANAGE = "system:manage"

    @property
    def resource(self) -> Resource:
        return Resource(self.value.split(":", 1)[0])

    @property
    def action(self) -> Action:
        return Action(self.value.split(":", 1)[1])


PermissionLike = Union[Permission, str]


def permission_token(permission: PermissionLike) -> str:
    """Plain string form of a permission, without validating it."""
    if isinstance(permission, Enum):
        return permission.value
    return str(permission)


def parse_permission(token: PermissionLike) -> Union[Permission, str]:
    """
    Validate a permission token.

    Returns the ``Permission`` member, or ``WILDCARD`` for ``"*"``.
    Anything else is a configuration error.
    """
    value = permission_token(token)
    if value == WILDCARD:
        return WILDCARD
    try:
        return Permission(value)
    except ValueError:
        raise ConfigurationError(
            f"Unknown permission '{value}'",
            details={"permission": value},
        )


# ── Map URL path segments to resources ───────────────────────────
MODULE_MAP: dict[str, Resource] = {
    "users": Resource.USERS,
    "vendors": Resource.VENDORS,
    "products": Resource.PRODUCTS,
    "items": Resource.PRODUCTS,       # /api/v1/items → products:* permission
    "orders": Resource.ORDERS,
    "payments": Resource.PAYMENTS,
    "settings": Resource.SETTINGS,
    "analytics": Resource.ANALYTICS,
    "system": Resource.SYSTEM,
}

# ── Map HTTP methods to RBAC actions ─────────────────────────────
METHOD_TO_ACTION: dict[str, Action] = {
    "GET": Action.READ,
    "POST": Action.WRITE,
    "PUT": Action.WRITE,
    "PATCH": Action.WRITE,
    "DELETE": Action.DELETE,
}


def resolve_permission_from_request(request: Request) -> str | None:
    """
    Derive the required permission string from the request.

    URL pattern expected:  /api/{version}/{module}/...
    Returns e.g. "users:read" or None if module is unknown.
    """
    path_parts = request.url.path.strip("/").split("/")
    # path_parts = ["api", "v1", "users", ...]
    module_name = path_parts[2] if len(path_parts) > 2 else None
    resource = MODULE_MAP.get(module_name) if module_name else None
    action = METHOD_TO_ACTION.get(request.method)

    if not resource or not action:
        return None

    return f"{resource.value}:{action.value}"
