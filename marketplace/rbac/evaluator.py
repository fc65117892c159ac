"""
Access control evaluator.

An evaluator is built once per principal (request or session) from the
principal's role and explicit grants, and answers permission and role
questions with plain booleans. Denial is never an exception; only an
unknown role or permission token raises ``ConfigurationError``.
"""

from dataclasses import dataclass
from typing import Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .permissions import (
    Permission,
    PermissionLike,
    WILDCARD,
    parse_permission,
    permission_token,
)
from .roles import (
    Role,
    RolePermissionTable,
    get_role_permissions,
    parse_role,
    role_rank,
)


AccessLevel = Literal["admin", "vendor", "customer"]


class Principal(BaseModel):
    """The authenticated subject of an authorization check."""

    model_config = ConfigDict(frozen=True)

    user_id: Optional[str] = None
    role: Role
    permissions: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class UserPermissions:
    can_read: bool
    can_write: bool
    can_update: bool
    can_delete: bool
    can_manage: bool


class AccessControlEvaluator:
    """Pure permission/role decisions for a single principal."""

    def __init__(self, role: Role, effective_permissions: frozenset[str]):
        self._role = role
        self._permissions = effective_permissions

    # ── Construction ─────────────────────────────────────────────
    @classmethod
    def create(
        cls,
        role: Union[Role, str],
        explicit_permissions: Optional[Iterable[PermissionLike]] = None,
        role_permissions: Optional[RolePermissionTable] = None,
    ) -> "AccessControlEvaluator":
        """
        Build the effective permission set: role defaults ∪ explicit grants.

        Raises ConfigurationError for an unknown role or grant token.
        """
        resolved = parse_role(role)
        effective = set(get_role_permissions(resolved, role_permissions))
        for grant in explicit_permissions or ():
            parse_permission(grant)
            effective.add(permission_token(grant))
        return cls(resolved, frozenset(effective))

    @classmethod
    def from_principal(
        cls,
        principal: Principal,
        role_permissions: Optional[RolePermissionTable] = None,
    ) -> "AccessControlEvaluator":
        return cls.create(principal.role, principal.permissions, role_permissions)

    @property
    def role(self) -> Role:
        return self._role

    @property
    def permissions(self) -> frozenset[str]:
        return self._permissions

    # ── Permission checks ────────────────────────────────────────
    def has_permission(self, permission: PermissionLike) -> bool:
        # Super admin has all permissions
        if self._role == Role.SUPER_ADMIN:
            return True
        if WILDCARD in self._permissions:
            return True
        return permission_token(permission) in self._permissions

    def has_resource_permission(self, resource, action) -> bool:
        return self.has_permission(
            f"{permission_token(resource)}:{permission_token(action)}"
        )

    def has_any_permission(self, permissions: Iterable[PermissionLike]) -> bool:
        return any(self.has_permission(p) for p in permissions)

    def has_all_permissions(self, permissions: Iterable[PermissionLike]) -> bool:
        return all(self.has_permission(p) for p in permissions)

    # ── Role checks ──────────────────────────────────────────────
    def has_role(self, role: Union[Role, str, Iterable[Union[Role, str]]]) -> bool:
        if isinstance(role, (Role, str)):
            return self._role == parse_role(role)
        return any(self._role == parse_role(r) for r in role)

    def has_role_or_higher(self, role: Union[Role, str]) -> bool:
        """True iff this principal sits at or above ``role`` in the hierarchy."""
        return role_rank(self._role) >= role_rank(role)

    # ── Summary ──────────────────────────────────────────────────
    def get_user_permissions(self) -> UserPermissions:
        staff = self.has_role([Role.ADMIN, Role.SUPER_ADMIN])
        sellers = self.has_role([Role.VENDOR, Role.ADMIN, Role.SUPER_ADMIN])
        can_write = (
            self.has_resource_permission("products", "write")
            or self.has_resource_permission("orders", "write")
            or sellers
        )
        return UserPermissions(
            can_read=(
                self.has_resource_permission("products", "read")
                or self.has_resource_permission("orders", "read")
                or staff
            ),
            can_write=can_write,
            can_update=can_write,
            can_delete=(
                self.has_resource_permission("products", "delete")
                or self.has_resource_permission("orders", "delete")
                or staff
            ),
            can_manage=(
                self.has_resource_permission("system", "manage")
                or self.has_role(Role.SUPER_ADMIN)
            ),
        )

    def get_access_level(self) -> AccessLevel:
        if self.can_access_admin_panel():
            return "admin"
        if self.can_access_vendor_panel():
            return "vendor"
        return "customer"

    # ── Panels ───────────────────────────────────────────────────
    def can_access_admin_panel(self) -> bool:
        return self.has_role([Role.ADMIN, Role.SUPER_ADMIN])

    def can_access_vendor_panel(self) -> bool:
        return self.has_role([Role.VENDOR, Role.ADMIN, Role.SUPER_ADMIN])

    # ── Management capabilities ──────────────────────────────────
    def can_manage_users(self) -> bool:
        return self.has_permission(Permission.USERS_MANAGE)

    def can_manage_vendors(self) -> bool:
        return self.has_permission(Permission.VENDORS_MANAGE)

    def can_approve_vendors(self) -> bool:
        return self.has_permission(Permission.VENDORS_APPROVE)

    def can_manage_products(self) -> bool:
        return self.has_permission(Permission.PRODUCTS_MANAGE)

    def can_approve_products(self) -> bool:
        return self.has_permission(Permission.PRODUCTS_APPROVE)

    def can_manage_orders(self) -> bool:
        return self.has_permission(Permission.ORDERS_MANAGE)

    def can_manage_payments(self) -> bool:
        return self.has_permission(Permission.PAYMENTS_MANAGE)

    def can_manage_settings(self) -> bool:
        return self.has_permission(Permission.SETTINGS_MANAGE)

    def can_view_analytics(self) -> bool:
        return self.has_permission(Permission.ANALYTICS_READ)

    def can_manage_system(self) -> bool:
        return self.has_permission(Permission.SYSTEM_MANAGE)

    # ── Own-entity capabilities ──────────────────────────────────
    def can_edit_own_products(self) -> bool:
        return self.has_role(Role.VENDOR) or self.can_manage_products()

    def can_view_own_orders(self) -> bool:
        return self.has_role([Role.CUSTOMER, Role.VENDOR]) or self.can_manage_orders()

    def can_edit_own_profile(self) -> bool:
        return True  # every authenticated principal

    def can_delete_own_account(self) -> bool:
        return self.has_role([Role.CUSTOMER, Role.VENDOR])

    # ── Vendor capabilities ──────────────────────────────────────
    def can_create_products(self) -> bool:
        return self.has_role(Role.VENDOR) or self.has_permission(
            Permission.PRODUCTS_WRITE
        )

    def can_manage_own_store(self) -> bool:
        return self.has_role(Role.VENDOR)

    def can_view_earnings(self) -> bool:
        return self.has_role(Role.VENDOR) or self.can_view_analytics()

    def can_request_payout(self) -> bool:
        return self.has_role(Role.VENDOR)

    # ── Admin capabilities ───────────────────────────────────────
    def can_ban_users(self) -> bool:
        return self.has_role([Role.ADMIN, Role.SUPER_ADMIN])

    def can_configure_system(self) -> bool:
        return self.has_role(Role.SUPER_ADMIN)

    def can_access_system_logs(self) -> bool:
        return self.has_role(Role.SUPER_ADMIN)

    def can_manage_backups(self) -> bool:
        return self.has_role(Role.SUPER_ADMIN)

    def __repr__(self) -> str:
        return (
            f"AccessControlEvaluator(role={self._role.value!r}, "
            f"permissions={sorted(self._permissions)!r})"
        )
