from __future__ import annotations

from typing import Dict, Optional

from gateway.adapters.evolution import EvolutionClient
from gateway.config import Settings
from gateway.types import ProviderClient


class AdapterRegistry:
    """Registry for messaging provider clients by name.

    Tenant rows are keyed by provider name as well, so the same name selects
    both the client class and the `whatsapp_config` row.
    """

    _registry: Dict[str, type[ProviderClient]] = {
        "evolution": EvolutionClient,
    }

    @classmethod
    def get(cls, name: str, settings: Optional[Settings] = None) -> ProviderClient:
        provider_cls = cls._registry.get(name)
        if provider_cls is None:
            raise KeyError(f"Unknown messaging provider: {name}")
        return provider_cls(settings)  # type: ignore[call-arg]

    @classmethod
    def register(cls, name: str, provider_cls: type[ProviderClient]) -> None:
        cls._registry[name] = provider_cls
