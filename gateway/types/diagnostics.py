from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .results import HealthVerdict


class GlobalConfigSummary(BaseModel):
    evolution_api_configured: bool = False
    api_url: Optional[str] = None
    default_instance_configured: bool = False
    default_instance_name: Optional[str] = None


class TenantConfigSummary(BaseModel):
    has_own_config: bool = False
    instance_name: Optional[str] = None
    is_active: bool = False


class InstanceState(BaseModel):
    name: str
    state: str


class DiagnosticsSnapshot(BaseModel):
    """Read-only troubleshooting view of the resolver's inputs and verdicts.

    Operator-facing only: it reveals instance names and states. Credentials
    are masked in `resolved_config` and stripped from `all_instances`.

    Attributes:
        resolver_version: Version tag of the resolution logic.
        global_config: Presence/summary of the deployment-wide account.
        tenant_config: Presence/summary of the tenant row, when a tenant was given.
        resolved_config: Config resolution picks with the health check skipped.
        instance_health: Live probe of `resolved_config`, when one was found.
        tenant_fallthrough: True when the tenant instance is resolvable but not
            connected, i.e. sends for this tenant currently go to the global tier.
        all_instances: Inventory of the provider account (name and state).
    """

    resolver_version: str
    global_config: GlobalConfigSummary
    tenant_config: Optional[TenantConfigSummary] = None
    resolved_config: Optional[Dict[str, Any]] = None
    instance_health: Optional[HealthVerdict] = None
    tenant_fallthrough: bool = False
    all_instances: List[InstanceState] = Field(default_factory=list)
