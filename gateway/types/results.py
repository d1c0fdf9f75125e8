from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from .enums import ConnectionState, ErrorClass, SourceTier


class HealthVerdict(BaseModel):
    """Live connection status of one provider instance.

    Attributes:
        state: Raw provider state token ("open", "connecting", "not_found", "error", ...).
        owner_jid: Identity owning the instance, e.g. "5511999999999@s.whatsapp.net".
        phone_number: Portion of `owner_jid` before the first "@".
        connected: Derived, true iff `state == "open"`.
    """

    model_config = ConfigDict(frozen=True)

    state: str
    owner_jid: Optional[str] = None
    phone_number: Optional[str] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def connected(self) -> bool:
        return self.state == ConnectionState.OPEN.value


class InstanceSummary(BaseModel):
    """One entry of the provider's instance inventory."""

    name: str
    state: str = ConnectionState.UNKNOWN.value
    owner_jid: Optional[str] = None


class ProviderResponse(BaseModel):
    """Raw outcome of one HTTP call to the provider's send endpoint."""

    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class SendOutcome(BaseModel):
    """Result of a dispatch, returned to callers and mirrored in the delivery log.

    Example:
        >>> from gateway.types import SendOutcome, SourceTier
        >>> SendOutcome(success=True, message_id="abc", instance_used="otp-1", source=SourceTier.GLOBAL)
    """

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    error_class: Optional[ErrorClass] = None
    instance_used: Optional[str] = None
    source: Optional[SourceTier] = None
