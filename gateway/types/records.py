from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel

from .enums import DeliveryStatus


class LogContext(BaseModel):
    """Caller-supplied metadata stored alongside each delivery attempt.

    Attributes:
        tenant_id: Barbershop the message belongs to, if any.
        category: Free-form message type ("notification", "otp", "reminder", ...).
        recipient_name: Display name of the recipient.
        related_entity_id: Appointment (or other entity) that triggered the send.
        actor_id: User who triggered the send.
    """

    tenant_id: Optional[str] = None
    category: str = "notification"
    recipient_name: Optional[str] = None
    related_entity_id: Optional[str] = None
    actor_id: Optional[str] = None


class DeliveryLogRecord(BaseModel):
    """Append-only audit row for one dispatch attempt that reached the provider."""

    tenant_id: Optional[str] = None
    recipient_address: str
    recipient_name: str
    body: str
    category: str
    status: DeliveryStatus
    provider: str
    provider_message_id: Optional[str] = None
    related_entity_id: Optional[str] = None
    actor_id: Optional[str] = None
    raw_response: Optional[Any] = None
    error_message: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        """Map onto the `whatsapp_logs` column names."""
        row: Dict[str, Any] = {
            "barbershop_id": self.tenant_id,
            "recipient_phone": self.recipient_address,
            "recipient_name": self.recipient_name,
            "message_content": self.body,
            "message_type": self.category,
            "status": self.status.value,
            "provider": self.provider,
            "whatsapp_message_id": self.provider_message_id,
            "appointment_id": self.related_entity_id,
            "created_by": self.actor_id,
            "response_data": self.raw_response,
            "error_message": self.error_message,
        }
        return row
