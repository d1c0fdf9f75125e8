"""Router aggregation."""

from __future__ import annotations

from fastapi import APIRouter

from gateway.routers import diagnostics as diagnostics_router_module
from gateway.routers import health as health_router_module
from gateway.routers import messaging as messaging_router_module

# Create aggregated router
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router_module.router)
api_router.include_router(messaging_router_module.router)
api_router.include_router(diagnostics_router_module.router)

__all__ = ["api_router"]
