from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

ROUNDING_POLICIES = ("NONE", "UP", "DOWN", "NEAREST")


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── Application ──────────────────────────────────────────────
    app_name: str = "Marketplace Core"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    api_version: str = "v1"

    # ── JWT / Security ───────────────────────────────────────────
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # ── CORS ─────────────────────────────────────────────────────
    cors_allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    cors_allow_credentials: bool = True
    cors_allowed_methods: list[str] = ["*"]
    cors_allowed_headers: list[str] = ["*"]

    # ── Currency ─────────────────────────────────────────────────
    base_currency: str = "USD"
    default_rounding: str = "NEAREST"
    strict_base_currency: bool = False
    currencies_file: Optional[str] = None

    # ── RBAC ─────────────────────────────────────────────────────
    role_permissions_file: Optional[str] = None

    @field_validator("base_currency")
    @classmethod
    def validate_base_currency(cls, v):
        v = v.upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("base_currency must be a three-letter ISO 4217 code")
        return v

    @field_validator("default_rounding")
    @classmethod
    def validate_default_rounding(cls, v):
        v = v.upper()
        if v not in ROUNDING_POLICIES:
            raise ValueError(f"default_rounding must be one of {', '.join(ROUNDING_POLICIES)}")
        return v

    class Config:
        env_file = ".env.local"
        extra = "ignore"


# ── Module-level singleton ──────────────────────────────────────
settings = Settings()
