# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the Academia API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from academia import __version__
from academia.api.errors import register_exception_handlers
from academia.api.middleware.auth import AuthMiddleware
from academia.api.middleware.rate_limit import limiter
from academia.api.routes import api_router, health
from academia.core.config import Settings, get_settings
from academia.domains.auth.gate import AuthGate
from academia.domains.auth.jwt import SessionTokenManager
from academia.domains.auth.password import PasswordHasher
from academia.infrastructure.database import TenantConnectionRegistry, ensure_tenant_indexes
from academia.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def build_auth_gate(settings: Settings, registry: TenantConnectionRegistry) -> AuthGate:
    """Wire the auth gate from settings.

    Args:
        settings: Application settings.
        registry: Tenant connection registry.

    Returns:
        Configured AuthGate.
    """
    return AuthGate(
        registry=registry,
        token_manager=SessionTokenManager(settings.jwt),
        hasher=PasswordHasher(rounds=settings.auth.bcrypt_rounds),
        settings=settings.auth,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging on startup and closes every cached tenant
    connection on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting Academia API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    yield

    try:
        await app.state.tenant_registry.close_all()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning("Error closing database connections: %s", str(e))

    logger.info("Shutting down Academia API")


def create_app(
    registry: TenantConnectionRegistry | None = None,
    auth_gate: AuthGate | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        registry: Tenant connection registry. Built from settings if omitted.
        auth_gate: Auth gate. Built from settings if omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Academia API",
        description="Multi-tenant school management backend",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    if registry is None:
        registry = TenantConnectionRegistry(
            settings.database,
            initializer=ensure_tenant_indexes,
        )
    app.state.tenant_registry = registry
    app.state.auth_gate = auth_gate or build_auth_gate(settings, registry)
    app.state.limiter = limiter

    # =========================================================================
    # Exception handlers
    # =========================================================================
    register_exception_handlers(app)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    # Rate limiting runs after auth so limits are keyed per principal
    app.add_middleware(SlowAPIMiddleware)

    # Auth middleware - verifies the session cookies
    app.add_middleware(AuthMiddleware)

    # CORS middleware (added last to execute first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(api_router)

    return app
