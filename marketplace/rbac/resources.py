"""
Entity-scoped access rules.

Every check follows the same shape: the owner of an entity may act on it
without the blanket permission, anyone else needs the blanket
``resource:action`` permission.
"""

from typing import Optional

from .evaluator import AccessControlEvaluator
from .permissions import Permission
from .roles import Role


CANCELLABLE_ORDER_STATUSES = frozenset({"PENDING", "CONFIRMED"})


class ResourceAccessControl:
    def __init__(self, evaluator: AccessControlEvaluator):
        self.evaluator = evaluator

    def _is_owning_vendor(self, vendor_id: Optional[str], current_user_id: str) -> bool:
        return (
            vendor_id is not None
            and vendor_id == current_user_id
            and self.evaluator.has_role(Role.VENDOR)
        )

    # ── Users ────────────────────────────────────────────────────
    def can_view_user(self, target_user_id: str, current_user_id: str) -> bool:
        if target_user_id == current_user_id:
            return True
        return self.evaluator.has_permission(Permission.USERS_READ)

    def can_edit_user(self, target_user_id: str, current_user_id: str) -> bool:
        if target_user_id == current_user_id:
            return True
        return self.evaluator.has_permission(Permission.USERS_WRITE)

    def can_delete_user(self, target_user_id: str, current_user_id: str) -> bool:
        if target_user_id == current_user_id:
            # A super admin can never remove itself
            if self.evaluator.has_role(Role.SUPER_ADMIN):
                return False
            return self.evaluator.can_delete_own_account()
        return self.evaluator.has_permission(Permission.USERS_DELETE)

    # ── Products ─────────────────────────────────────────────────
    def can_view_product(
        self,
        product_id: str,
        vendor_id: Optional[str] = None,
        current_user_id: Optional[str] = None,
    ) -> bool:
        # Catalogue is public
        return True

    def can_edit_product(
        self, product_id: str, vendor_id: str, current_user_id: str
    ) -> bool:
        if self._is_owning_vendor(vendor_id, current_user_id):
            return True
        return self.evaluator.has_permission(Permission.PRODUCTS_WRITE)

    def can_delete_product(
        self, product_id: str, vendor_id: str, current_user_id: str
    ) -> bool:
        if self._is_owning_vendor(vendor_id, current_user_id):
            return True
        return self.evaluator.has_permission(Permission.PRODUCTS_DELETE)

    # ── Orders ───────────────────────────────────────────────────
    def can_view_order(
        self,
        order_id: str,
        order_user_id: str,
        vendor_id: Optional[str],
        current_user_id: str,
    ) -> bool:
        if order_user_id == current_user_id:
            return True
        if self._is_owning_vendor(vendor_id, current_user_id):
            return True
        return self.evaluator.has_permission(Permission.ORDERS_READ)

    def can_edit_order(
        self,
        order_id: str,
        order_user_id: str,
        vendor_id: Optional[str],
        current_user_id: str,
    ) -> bool:
        # Buyers only cancel, see can_cancel_order
        if order_user_id == current_user_id:
            return False
        if self._is_owning_vendor(vendor_id, current_user_id):
            return True
        return self.evaluator.has_permission(Permission.ORDERS_WRITE)

    def can_cancel_order(
        self,
        order_id: str,
        order_user_id: str,
        order_status: str,
        current_user_id: str,
    ) -> bool:
        if order_status not in CANCELLABLE_ORDER_STATUSES:
            return False
        if order_user_id == current_user_id:
            return True
        return self.evaluator.has_permission(Permission.ORDERS_WRITE)

    # ── Vendors ──────────────────────────────────────────────────
    def can_view_vendor(
        self,
        vendor_id: str,
        vendor_user_id: str,
        current_user_id: str,
        is_public: bool = True,
    ) -> bool:
        if is_public:
            return True
        if vendor_user_id == current_user_id:
            return True
        return self.evaluator.has_permission(Permission.VENDORS_READ)

    def can_edit_vendor(
        self, vendor_id: str, vendor_user_id: str, current_user_id: str
    ) -> bool:
        if self._is_owning_vendor(vendor_user_id, current_user_id):
            return True
        return self.evaluator.has_permission(Permission.VENDORS_WRITE)

    def can_approve_vendor(self, vendor_id: str) -> bool:
        return self.evaluator.has_permission(Permission.VENDORS_APPROVE)
