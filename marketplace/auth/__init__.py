from .helpers import (
    create_access_token,
    create_principal_token,
    decode_access_token,
    principal_from_claims,
)

__all__ = [
    "create_access_token",
    "create_principal_token",
    "decode_access_token",
    "principal_from_claims",
]
