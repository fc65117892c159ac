"""
Marketplace Core: main application.

Assembles all packages: config, middleware, access control, currencies.
"""

import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace.config import (
    Settings,
    settings as default_settings,
    load_currency_registry,
    load_role_permissions,
)
from marketplace.currency import CurrencyEngine, currency_router
from marketplace.access import access_router
from marketplace.middleware import AuthPermissionMiddleware
from marketplace.utils import Logger, MarketplaceError, error_response
from marketplace.utils.logger import ROOT_LOGGER

logger = Logger("request")


# ── Request Logging Middleware ───────────────────────────────────
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request: method, path, status code, and duration."""

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        method = request.method
        path = request.url.path
        client = request.client.host if request.client else "unknown"

        logger.info(f"--> {method} {path} (from {client})")

        try:
            response = await call_next(request)
        except Exception as exc:
            duration = round((time.time() - start) * 1000, 2)
            logger.error(f"<-- {method} {path} | 500 | {duration}ms")
            logger.error(f"    Exception: {exc}")
            logger.error(traceback.format_exc())
            raise

        duration = round((time.time() - start) * 1000, 2)
        status = response.status_code

        if status >= 500:
            logger.error(f"<-- {method} {path} | {status} | {duration}ms")
        elif status >= 400:
            logger.warning(f"<-- {method} {path} | {status} | {duration}ms")
        else:
            logger.info(f"<-- {method} {path} | {status} | {duration}ms")

        return response


def build_currency_engine(config: Settings) -> CurrencyEngine:
    currencies = (
        load_currency_registry(config.currencies_file)
        if config.currencies_file
        else None
    )
    engine = CurrencyEngine(
        currencies,
        strict_base_currency=config.strict_base_currency,
        default_rounding=config.default_rounding,
    )
    base = engine.get_base_currency()
    if base.code != config.base_currency:
        logger.warning(
            f"Configured base currency {config.base_currency} differs from "
            f"registry default {base.code}"
        )
    return engine


# ── App factory ──────────────────────────────────────────────────
def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or default_settings
    Logger(ROOT_LOGGER).set_level("DEBUG" if config.debug else "INFO")

    # ── Lifespan ─────────────────────────────────────────────────
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{config.app_name} {config.app_version} starting ({config.environment})")
        yield
        logger.info(f"{config.app_name} shutting down")

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        description="Multi-vendor marketplace access control and currency services",
        docs_url="/api/docs",
        lifespan=lifespan,
    )

    # Static tables are loaded once and replaced wholesale, never mutated
    app.state.settings = config
    app.state.currency_engine = build_currency_engine(config)
    app.state.role_permissions = (
        load_role_permissions(config.role_permissions_file)
        if config.role_permissions_file
        else None
    )

    v = config.api_version  # "v1"

    # ── Auth + RBAC middleware ───────────────────────────────
    app.add_middleware(AuthPermissionMiddleware, api_prefix=f"/api/{v}")

    # ── Request logging (runs on every request) ──────────────
    app.add_middleware(RequestLoggingMiddleware)

    # ── CORS (outermost) ─────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allowed_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allowed_methods,
        allow_headers=config.cors_allowed_headers,
    )

    # ── Exception handlers ───────────────────────────────────
    @app.exception_handler(MarketplaceError)
    async def marketplace_exception_handler(request: Request, exc: MarketplaceError):
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        return error_response(exc.message, code=exc.status_code, data=exc.details or None)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}:")
        logger.error(traceback.format_exc())
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": {
                    "code": 500,
                    "message": str(exc) if config.debug else "Internal server error",
                },
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    # ── Routes ───────────────────────────────────────────────
    app.include_router(
        currency_router,
        prefix=f"/api/{v}/currencies",
        tags=["Currencies"],
    )
    app.include_router(
        access_router,
        prefix=f"/api/{v}/access",
        tags=["Access Control"],
    )

    # ── Health check ─────────────────────────────────────────
    @app.get("/health")
    async def health():
        engine: CurrencyEngine = app.state.currency_engine
        return {
            "status": "healthy",
            "app": config.app_name,
            "version": config.app_version,
            "currencies": len(engine.currencies),
        }

    return app
