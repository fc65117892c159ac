"""Tests for ownership-aware entity access rules."""

import pytest

from marketplace.rbac import ResourceAccessControl, Role


@pytest.fixture
def access(make_evaluator):
    def _access(role, permissions=None):
        return ResourceAccessControl(make_evaluator(role, permissions))

    return _access


class TestUserAccess:
    def test_self_view_and_edit(self, access):
        customer = access(Role.CUSTOMER)
        assert customer.can_view_user("u1", "u1")
        assert customer.can_edit_user("u1", "u1")

    def test_other_user_requires_permission(self, access):
        assert not access(Role.CUSTOMER).can_view_user("u2", "u1")
        assert access(Role.ADMIN).can_view_user("u2", "u1")
        assert access(Role.ADMIN).can_edit_user("u2", "u1")

    def test_customer_can_delete_own_account(self, access):
        assert access(Role.CUSTOMER).can_delete_user("u1", "u1")

    def test_admin_cannot_delete_own_account(self, access):
        assert not access(Role.ADMIN).can_delete_user("u1", "u1")

    def test_super_admin_never_deletes_itself(self, access):
        assert not access(Role.SUPER_ADMIN).can_delete_user("root", "root")
        assert access(Role.SUPER_ADMIN).can_delete_user("u2", "root")


class TestProductAccess:
    def test_catalogue_is_public(self, access):
        assert access(Role.CUSTOMER).can_view_product("p1")

    def test_owning_vendor_can_edit_and_delete(self, access):
        vendor = access(Role.VENDOR)
        assert vendor.can_edit_product("p1", "v1", "v1")
        assert vendor.can_delete_product("p1", "v1", "v1")

    def test_other_vendor_cannot_delete(self, access):
        assert not access(Role.VENDOR).can_delete_product("p1", "v1", "v2")

    def test_other_vendor_edit_follows_blanket_permission(self, access):
        # VENDOR holds products:write
        assert access(Role.VENDOR).can_edit_product("p1", "v1", "v2")

    def test_ownership_requires_vendor_role(self, access):
        assert not access(Role.CUSTOMER).can_delete_product("p1", "c1", "c1")


class TestOrderAccess:
    def test_buyer_can_view_but_not_edit(self, access):
        customer = access(Role.CUSTOMER)
        assert customer.can_view_order("o1", "c1", "v1", "c1")
        assert not customer.can_edit_order("o1", "c1", "v1", "c1")

    def test_vendor_can_edit_own_orders(self, access):
        assert access(Role.VENDOR).can_edit_order("o1", "c1", "v1", "v1")

    def test_customer_cannot_edit_other_orders(self, access):
        assert not access(Role.CUSTOMER).can_edit_order("o1", "c2", "v1", "c1")

    @pytest.mark.parametrize("status", ["PENDING", "CONFIRMED"])
    def test_buyer_cancels_open_orders(self, access, status):
        assert access(Role.CUSTOMER).can_cancel_order("o1", "c1", status, "c1")

    @pytest.mark.parametrize("status", ["SHIPPED", "DELIVERED", "CANCELLED"])
    def test_closed_orders_cannot_be_cancelled(self, access, status):
        assert not access(Role.SUPER_ADMIN).can_cancel_order("o1", "c1", status, "admin")

    def test_staff_cancel_needs_orders_write(self, access):
        assert access(Role.ADMIN).can_cancel_order("o1", "c1", "PENDING", "admin")
        assert not access(Role.CUSTOMER).can_cancel_order("o1", "c1", "PENDING", "c2")


class TestVendorAccess:
    def test_public_store_visible_to_all(self, access):
        assert access(Role.CUSTOMER).can_view_vendor("s1", "v1", "c1")

    def test_private_store(self, access):
        assert not access(Role.CUSTOMER).can_view_vendor("s1", "v1", "c1", is_public=False)
        assert access(Role.VENDOR).can_view_vendor("s1", "v1", "v1", is_public=False)
        assert access(Role.ADMIN).can_view_vendor("s1", "v1", "a1", is_public=False)

    def test_edit_vendor(self, access):
        assert access(Role.VENDOR).can_edit_vendor("s1", "v1", "v1")
        assert not access(Role.VENDOR).can_edit_vendor("s1", "v1", "v2")
        assert access(Role.ADMIN).can_edit_vendor("s1", "v1", "a1")

    def test_approve_vendor(self, access):
        assert access(Role.ADMIN).can_approve_vendor("s1")
        assert not access(Role.VENDOR).can_approve_vendor("s1")
