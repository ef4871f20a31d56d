# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides the root liveness message and a health endpoint
reporting uptime and open tenant connections.
"""

import logging
import time
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from academia import __version__
from academia.api.dependencies import get_tenant_registry
from academia.core.config import get_settings
from academia.infrastructure.database.tenant_registry import TenantConnectionRegistry
from academia.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class RootResponse(BaseModel):
    """Root liveness message."""
    status: str = Field(description="Always 'success'")
    message: str = Field(description="Liveness message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    open_tenant_connections: int = Field(description="Number of cached database connections")


@router.get("/", response_model=RootResponse, summary="Liveness message")
async def root() -> RootResponse:
    return RootResponse(status="success", message="website is working")


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(
    registry: Annotated[TenantConnectionRegistry, Depends(get_tenant_registry)],
) -> HealthResponse:
    """Report service status without touching any database."""
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        timestamp=utc_now(),
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        open_tenant_connections=len(registry.cached_tenants()),
    )
