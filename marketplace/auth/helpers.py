"""Low-level auth helpers: JWT encode/decode and principal extraction."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from fastapi import HTTPException, status
from pydantic import ValidationError

from marketplace.config import settings
from marketplace.rbac.evaluator import Principal
from marketplace.rbac.roles import parse_role
from marketplace.utils.exceptions import ConfigurationError


# ── JWT ──────────────────────────────────────────────────────────
def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT containing arbitrary `data`.

    Expected payload keys (set by the authentication service):
      sub, role, permissions
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_principal_token(
    principal: Principal, expires_delta: timedelta | None = None
) -> str:
    claims = {
        "role": principal.role.value,
        "permissions": list(principal.permissions),
    }
    # "sub" must be a string when present
    if principal.user_id is not None:
        claims["sub"] = principal.user_id
    return create_access_token(claims, expires_delta)


def decode_access_token(token: str) -> dict:
    """Decode and verify a JWT. Raises 401 on failure."""
    try:
        return jwt.decode(
            token, settings.secret_key, algorithms=[settings.algorithm]
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def principal_from_claims(payload: dict) -> Principal:
    """Build a Principal from decoded claims. Malformed claims raise ConfigurationError."""
    role = parse_role(payload.get("role", "CUSTOMER"))
    try:
        return Principal(
            user_id=payload.get("sub"),
            role=role,
            permissions=payload.get("permissions") or [],
        )
    except ValidationError as e:
        raise ConfigurationError(
            "Malformed token claims", details={"errors": e.errors()}
        )
