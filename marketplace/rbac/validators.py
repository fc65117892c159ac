"""Lookups and validation over the static permission and role tables."""

from typing import Optional, Union

from .permissions import Action, Permission, Resource, permission_token
from .roles import Role, RolePermissionTable, get_role_permissions


def validate_permission_string(permission: str) -> bool:
    return permission in {p.value for p in Permission}


def validate_role_string(role: str) -> bool:
    return role in {r.value for r in Role}


def get_permissions_for_role(
    role: Union[Role, str], table: Optional[RolePermissionTable] = None
) -> list[str]:
    return get_role_permissions(role, table)


def get_all_permissions() -> list[Permission]:
    return list(Permission)


def get_all_roles() -> list[Role]:
    return list(Role)


def get_resource_permissions(resource: Union[Resource, str]) -> list[Permission]:
    prefix = f"{permission_token(resource)}:"
    return [p for p in Permission if p.value.startswith(prefix)]


def get_action_permissions(action: Union[Action, str]) -> list[Permission]:
    suffix = f":{permission_token(action)}"
    return [p for p in Permission if p.value.endswith(suffix)]
