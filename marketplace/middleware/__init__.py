"""
Authentication + permission middleware.

Runs on every request (except public routes):
  1. Decode JWT → extract sub, role, permissions
  2. Build a Principal and an AccessControlEvaluator on request.state
  3. Check the RBAC permission for the target module route
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from marketplace.auth.helpers import decode_access_token, principal_from_claims
from marketplace.rbac.evaluator import AccessControlEvaluator
from marketplace.rbac.permissions import resolve_permission_from_request
from marketplace.utils import Logger
from marketplace.utils.exceptions import ConfigurationError

logger = Logger("auth")


# Routes that skip all auth / permission checks
PUBLIC_ROUTES = [
    "/health",
    "/openapi.json",
    "/api/docs",
    "/redoc",
]

# Display-only surfaces open to anonymous shoppers
PUBLIC_PREFIXES = [
    "/currencies",
]


def is_public_route(path: str, api_prefix: str) -> bool:
    if path in PUBLIC_ROUTES:
        return True
    return any(
        path.startswith(f"{api_prefix}{prefix}") for prefix in PUBLIC_PREFIXES
    )


class AuthPermissionMiddleware(BaseHTTPMiddleware):
    """Single middleware that handles JWT verification + RBAC enforcement."""

    def __init__(self, app, api_prefix: str = "/api/v1"):
        super().__init__(app)
        self.api_prefix = api_prefix

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if request.method == "OPTIONS" or is_public_route(path, self.api_prefix):
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            return JSONResponse(
                status_code=401,
                content={"detail": "Missing Authorization header"},
            )

        if not auth_header.startswith("Bearer "):
            return JSONResponse(
                status_code=401,
                content={"detail": "Invalid token format. Expected 'Bearer <token>'"},
            )

        token = auth_header.split(" ", 1)[1].strip()

        try:
            payload = decode_access_token(token)
        except Exception as e:
            return JSONResponse(
                status_code=401,
                content={"detail": f"Invalid or expired token: {e}"},
            )

        # ── Build principal + evaluator ──────────────────────────
        role_table = getattr(request.app.state, "role_permissions", None)
        try:
            principal = principal_from_claims(payload)
            evaluator = AccessControlEvaluator.from_principal(principal, role_table)
        except ConfigurationError as e:
            logger.error(f"Rejected token for {payload.get('sub')}: {e.message}")
            return JSONResponse(
                status_code=401,
                content={"detail": f"Invalid token claims: {e.message}"},
            )

        request.state.user = payload
        request.state.principal = principal
        request.state.evaluator = evaluator

        # ── RBAC check ───────────────────────────────────────────
        required_perm = resolve_permission_from_request(request)
        if required_perm and not evaluator.has_permission(required_perm):
            return JSONResponse(
                status_code=403,
                content={
                    "detail": f"Permission denied. Requires: {required_perm}",
                },
            )

        return await call_next(request)
