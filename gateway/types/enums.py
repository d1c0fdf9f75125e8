from __future__ import annotations

from enum import Enum


class SourceTier(str, Enum):
    """Configuration layer a resolved instance came from.

    - TENANT: the barbershop's own `whatsapp_config` row
    - GLOBAL: the deployment-wide `system_config` entries
    """

    TENANT = "tenant"
    GLOBAL = "global"


class ErrorClass(str, Enum):
    """Failure taxonomy for outbound sends.

    Only INSTANCE_ERROR is eligible for the one-hop fallback; the other
    classes are returned to the caller as-is.

    - NO_CONFIG: nothing resolvable, the provider was never contacted
    - INSTANCE_ERROR: the provider reports the named instance is missing or invalid
    - SEND_FAILED: the provider rejected the send for another reason
    - EXCEPTION: transport-level failure (timeout, connection reset, ...)
    """

    NO_CONFIG = "no-config"
    INSTANCE_ERROR = "instance-error"
    SEND_FAILED = "send-failed"
    EXCEPTION = "exception"


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


class ConnectionState(str, Enum):
    """Provider state tokens the gateway reasons about.

    Providers may report other tokens (e.g. "close"); those are kept as raw
    strings on `HealthVerdict.state` and simply count as not connected.
    """

    OPEN = "open"
    CONNECTING = "connecting"
    NOT_FOUND = "not_found"
    ERROR = "error"
    UNKNOWN = "unknown"
