from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials

from gateway.services import WhatsAppGateway, get_gateway
from gateway.types import SendMessageRequest, SendOutcome
from server.config import Settings, get_settings

from .security import bearer, verify_token

router = APIRouter(prefix="", tags=["messaging"])


@router.post("/messages/send")
def send_message(
    payload: SendMessageRequest,
    credentials: HTTPAuthorizationCredentials | None = Security(bearer),
    settings: Settings = Depends(get_settings),
    gateway: WhatsAppGateway = Depends(get_gateway),
) -> SendOutcome:
    """Send a text through the resolved instance with one-hop failover.

    A failed send is still a 200: callers treat `success: false` as
    "notification not sent" without failing their own action.
    """
    try:
        verify_token(credentials, settings.internal_api_token, required=False)
    except PermissionError:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return gateway.send_with_failover(
        payload.tenant_id,
        payload.to,
        payload.text,
        payload.log_context(),
    )
