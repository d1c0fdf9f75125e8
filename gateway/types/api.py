from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .records import LogContext


class SendMessageRequest(BaseModel):
    """Internal send request accepted by the HTTP layer.

    Example:
        {
          "tenant_id": "7f1c...",
          "to": "+55 11 99999-9999",
          "text": "Seu horário está confirmado",
          "category": "appointment_confirmation",
          "recipient_name": "Ana",
          "related_entity_id": "appt-42"
        }
    """

    tenant_id: Optional[str] = None
    to: str = Field(min_length=1)
    text: str = Field(min_length=1)
    category: str = "notification"
    recipient_name: Optional[str] = None
    related_entity_id: Optional[str] = None
    actor_id: Optional[str] = None

    def log_context(self) -> LogContext:
        return LogContext(
            tenant_id=self.tenant_id,
            category=self.category,
            recipient_name=self.recipient_name,
            related_entity_id=self.related_entity_id,
            actor_id=self.actor_id,
        )


class GlobalConfigResponse(BaseModel):
    ok: bool = True
    api_url: Optional[str] = None
    api_key_masked: Optional[str] = None
