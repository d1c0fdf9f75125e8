from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

from .config import ResolvedConfig
from .records import DeliveryLogRecord
from .results import HealthVerdict, InstanceSummary, ProviderResponse


class ConfigStore(Protocol):
    """Read side of the backing data store.

    Implementations return raw JSON-ish dicts; the resolver owns parsing.
    A missing row is `None`, never an exception.
    """

    def get_system_value(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the `value` of the `system_config` row stored under `key`."""
        ...

    def get_tenant_config(self, tenant_id: str, provider: str) -> Optional[Dict[str, Any]]:
        """Return the `whatsapp_config` row (`config`, `is_active`) for a tenant."""
        ...


class DeliveryLog(Protocol):
    """Append-only sink for delivery records."""

    def insert(self, record: DeliveryLogRecord) -> None:
        ...


class ProviderClient(Protocol):
    """Subset of the messaging provider's HTTP API the gateway depends on.

    `check_instance_health` and `fetch_instances` never raise; failures come
    back as an error verdict or an empty list. `send_text` raises on transport
    errors so the dispatcher can classify them.
    """

    def check_instance_health(self, config: ResolvedConfig) -> HealthVerdict:
        ...

    def fetch_instances(self, api_url: str, api_key: str) -> List[InstanceSummary]:
        ...

    def send_text(self, config: ResolvedConfig, number: str, text: str) -> ProviderResponse:
        ...
