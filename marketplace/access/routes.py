from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from marketplace.rbac.evaluator import AccessControlEvaluator
from marketplace.rbac.guards import RequirePermission, get_request_evaluator
from marketplace.rbac.permissions import Permission
from marketplace.rbac.roles import ROLE_HIERARCHY, ROLE_PERMISSIONS
from marketplace.utils import success_response
from .schemas import PermissionCheckRequest

access_router = APIRouter()


@access_router.get("/me")
async def my_access(
    request: Request,
    evaluator: AccessControlEvaluator = Depends(get_request_evaluator),
):
    """Role, access level and capability flags of the caller."""
    principal = request.state.principal
    return success_response(
        data={
            "user_id": principal.user_id,
            "role": evaluator.role,
            "access_level": evaluator.get_access_level(),
            "permissions": sorted(evaluator.permissions),
            "capabilities": asdict(evaluator.get_user_permissions()),
            "can_access_admin_panel": evaluator.can_access_admin_panel(),
            "can_access_vendor_panel": evaluator.can_access_vendor_panel(),
        }
    )


@access_router.post("/check")
async def check_permissions(
    body: PermissionCheckRequest,
    evaluator: AccessControlEvaluator = Depends(get_request_evaluator),
):
    """Evaluate permissions for the caller. Denial is a normal result, not an error."""
    decisions = {p: evaluator.has_permission(p) for p in body.permissions}
    allowed = (
        evaluator.has_all_permissions(body.permissions)
        if body.require_all
        else evaluator.has_any_permission(body.permissions)
    )
    return success_response(data={"allowed": allowed, "permissions": decisions})


@access_router.get("/roles")
async def list_roles(
    request: Request,
    evaluator: AccessControlEvaluator = Depends(
        RequirePermission(Permission.SETTINGS_READ)
    ),
):
    """Role hierarchy (lowest first) and the active role → permission table."""
    table = getattr(request.app.state, "role_permissions", None) or ROLE_PERMISSIONS
    return success_response(
        data={
            "hierarchy": list(ROLE_HIERARCHY),
            "roles": {role.value: list(perms) for role, perms in table.items()},
        }
    )
