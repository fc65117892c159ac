"""
Explicit permission guards for handlers.

Usage:
    list_users = guard(evaluator, Permission.USERS_READ, list_users)

    @router.get("/", dependencies=[Depends(RequirePermission("users:read"))])
    async def list_users(request: Request):
        ...
"""

import inspect
from functools import wraps
from typing import Any, Callable, Iterable, Optional, Union

from fastapi import HTTPException, status
from starlette.requests import Request

from marketplace.utils.exceptions import PermissionDeniedError

from .evaluator import AccessControlEvaluator, AccessLevel, Principal
from .permissions import PermissionLike, permission_token
from .roles import Role, RolePermissionTable


def _wrap(check: Callable[[], bool], requirement: str, evaluator, handler):
    if inspect.iscoroutinefunction(handler):

        @wraps(handler)
        async def async_guarded(*args, **kwargs):
            if not check():
                raise PermissionDeniedError(requirement, evaluator.role.value)
            return await handler(*args, **kwargs)

        return async_guarded

    @wraps(handler)
    def guarded(*args, **kwargs):
        if not check():
            raise PermissionDeniedError(requirement, evaluator.role.value)
        return handler(*args, **kwargs)

    return guarded


def guard(
    evaluator: AccessControlEvaluator,
    permission: PermissionLike,
    handler: Callable[..., Any],
) -> Callable[..., Any]:
    """Return ``handler`` gated on ``permission``; denial raises PermissionDeniedError."""
    return _wrap(
        lambda: evaluator.has_permission(permission),
        permission_token(permission),
        evaluator,
        handler,
    )


def guard_role(
    evaluator: AccessControlEvaluator,
    role: Union[Role, str, Iterable[Union[Role, str]]],
    handler: Callable[..., Any],
) -> Callable[..., Any]:
    if isinstance(role, (Role, str)):
        requirement = f"{permission_token(role)} role"
    else:
        role = list(role)
        requirement = ", ".join(permission_token(r) for r in role) + " role"
    return _wrap(lambda: evaluator.has_role(role), requirement, evaluator, handler)


def guard_role_or_higher(
    evaluator: AccessControlEvaluator,
    role: Union[Role, str],
    handler: Callable[..., Any],
) -> Callable[..., Any]:
    return _wrap(
        lambda: evaluator.has_role_or_higher(role),
        f"{permission_token(role)} role or higher",
        evaluator,
        handler,
    )


# ── FastAPI dependencies ─────────────────────────────────────────
def get_request_evaluator(request: Request) -> AccessControlEvaluator:
    """Evaluator placed on request.state by AuthPermissionMiddleware."""
    evaluator: Optional[AccessControlEvaluator] = getattr(
        request.state, "evaluator", None
    )
    if evaluator is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return evaluator


class RequirePermission:
    def __init__(self, permission: PermissionLike):
        self.permission = permission

    def __call__(self, request: Request) -> AccessControlEvaluator:
        evaluator = get_request_evaluator(request)
        if not evaluator.has_permission(self.permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {permission_token(self.permission)} required",
            )
        return evaluator


class RequireRole:
    def __init__(self, *roles: Union[Role, str]):
        self.roles = roles

    def __call__(self, request: Request) -> AccessControlEvaluator:
        evaluator = get_request_evaluator(request)
        if not evaluator.has_role(self.roles):
            role_names = ", ".join(permission_token(r) for r in self.roles)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied: {role_names} role required",
            )
        return evaluator


class RequireRoleOrHigher:
    def __init__(self, role: Union[Role, str]):
        self.role = role

    def __call__(self, request: Request) -> AccessControlEvaluator:
        evaluator = get_request_evaluator(request)
        if not evaluator.has_role_or_higher(self.role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied: {permission_token(self.role)} role or higher required",
            )
        return evaluator


# ── One-shot helpers ─────────────────────────────────────────────
def can_user_access_resource(
    principal: Principal,
    resource,
    action,
    role_permissions: Optional[RolePermissionTable] = None,
) -> bool:
    evaluator = AccessControlEvaluator.from_principal(principal, role_permissions)
    return evaluator.has_resource_permission(resource, action)


def can_user_perform_action(
    principal: Principal,
    permission: PermissionLike,
    role_permissions: Optional[RolePermissionTable] = None,
) -> bool:
    evaluator = AccessControlEvaluator.from_principal(principal, role_permissions)
    return evaluator.has_permission(permission)


def get_user_access_level(
    principal: Principal,
    role_permissions: Optional[RolePermissionTable] = None,
) -> AccessLevel:
    return AccessControlEvaluator.from_principal(
        principal, role_permissions
    ).get_access_level()
