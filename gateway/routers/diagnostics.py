from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Security
from fastapi.security import HTTPAuthorizationCredentials

from gateway.services import WhatsAppGateway, get_gateway
from gateway.types import DiagnosticsSnapshot, GlobalConfigResponse, mask_secret
from server.config import Settings, get_settings

from .security import bearer, verify_token

router = APIRouter(prefix="", tags=["diagnostics"])


def require_operator(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer),
    settings: Settings = Depends(get_settings),
) -> None:
    """Operator-only guard; diagnostics reveal instance names and states."""
    try:
        verify_token(credentials, settings.operator_api_token, required=True)
    except PermissionError:
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.get("/diagnostics", dependencies=[Depends(require_operator)])
def diagnostics(
    tenant_id: Optional[str] = Query(default=None),
    gateway: WhatsAppGateway = Depends(get_gateway),
) -> DiagnosticsSnapshot:
    return gateway.diagnose(tenant_id)


@router.get("/config/global", dependencies=[Depends(require_operator)])
def global_config(gateway: WhatsAppGateway = Depends(get_gateway)) -> GlobalConfigResponse:
    """Global provider endpoint with the API key masked."""
    config = gateway.global_config()
    if config is None:
        return GlobalConfigResponse(ok=True)
    return GlobalConfigResponse(
        ok=True,
        api_url=config.api_url or "",
        api_key_masked=mask_secret(config.api_key),
    )
