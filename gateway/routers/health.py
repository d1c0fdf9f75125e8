from __future__ import annotations

from fastapi import APIRouter, Depends

from gateway.config import Settings as GatewaySettings
from gateway.config import get_settings as get_gateway_settings
from server.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(
    settings: Settings = Depends(get_settings),
    gateway_settings: GatewaySettings = Depends(get_gateway_settings),
) -> dict:
    """Liveness plus whether the gateway can reach its config store at all.

    `store_configured` is false when the Supabase credentials are missing; sends
    then fail with 503 until the environment is fixed. No provider call is made.
    """
    store_configured = bool(
        gateway_settings.supabase_url and gateway_settings.supabase_service_role_key
    )
    return {
        "ok": True,
        "service": "whatsapp-gateway",
        "version": settings.app_version,
        "provider": gateway_settings.provider,
        "store_configured": store_configured,
        "send_auth_required": bool(settings.internal_api_token),
    }


@router.get("/healthz")
async def healthz() -> dict:
    """Bare liveness probe for load balancers."""
    return {"status": "ok"}
