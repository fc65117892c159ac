"""
Role definitions and permission matrix.

Permission format:  "{resource}:{action}"
  - Resources : users, vendors, products, orders, payments, settings,
                analytics, system
  - Actions   : read, write, delete, approve, manage
  - Wildcard  : "*"  satisfies every check (super admins only by default)
"""

from enum import Enum
from typing import Mapping, Sequence, Union

from marketplace.utils.exceptions import ConfigurationError

from .permissions import Permission, WILDCARD


class Role(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    VENDOR = "VENDOR"
    CUSTOMER = "CUSTOMER"


# Lowest privilege first. The only ordering used for "role or higher" checks.
ROLE_HIERARCHY: tuple[Role, ...] = (
    Role.CUSTOMER,
    Role.VENDOR,
    Role.ADMIN,
    Role.SUPER_ADMIN,
)

RolePermissionTable = Mapping[Role, Sequence[str]]

ROLE_PERMISSIONS: dict[Role, tuple[str, ...]] = {
    Role.SUPER_ADMIN: (
        WILDCARD,  # everything
    ),
    Role.ADMIN: (
        Permission.USERS_READ.value,
        Permission.USERS_WRITE.value,
        Permission.USERS_DELETE.value,
        Permission.VENDORS_READ.value,
        Permission.VENDORS_WRITE.value,
        Permission.VENDORS_APPROVE.value,
        Permission.PRODUCTS_READ.value,
        Permission.PRODUCTS_WRITE.value,
        Permission.PRODUCTS_APPROVE.value,
        Permission.ORDERS_READ.value,
        Permission.ORDERS_WRITE.value,
        Permission.PAYMENTS_READ.value,
        Permission.SETTINGS_READ.value,
        Permission.SETTINGS_WRITE.value,
        Permission.ANALYTICS_READ.value,
    ),
    Role.VENDOR: (
        Permission.PRODUCTS_READ.value,
        Permission.PRODUCTS_WRITE.value,
        Permission.ORDERS_READ.value,
        Permission.ORDERS_WRITE.value,
        Permission.ANALYTICS_READ.value,
    ),
    Role.CUSTOMER: (
        Permission.PRODUCTS_READ.value,
        Permission.ORDERS_READ.value,
    ),
}


def parse_role(role: Union[Role, str]) -> Role:
    """Coerce a role name to ``Role``. Unknown names are a configuration error."""
    if isinstance(role, Role):
        return role
    try:
        return Role(role)
    except ValueError:
        raise ConfigurationError(
            f"Unknown role '{role}'",
            details={"role": role, "allowed": [r.value for r in Role]},
        )


def role_rank(role: Union[Role, str]) -> int:
    """Position of ``role`` in ``ROLE_HIERARCHY``."""
    resolved = parse_role(role)
    if resolved not in ROLE_HIERARCHY:
        raise ConfigurationError(
            f"Role '{resolved.value}' is not part of the role hierarchy"
        )
    return ROLE_HIERARCHY.index(resolved)


def get_role_permissions(
    role: Union[Role, str],
    table: RolePermissionTable | None = None,
) -> list[str]:
    """Return the default permission list for a given role."""
    resolved = parse_role(role)
    source = ROLE_PERMISSIONS if table is None else table
    return list(source.get(resolved, ()))
