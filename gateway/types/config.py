from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from .enums import SourceTier


class ResolvedConfig(BaseModel):
    """What to use to send: endpoint, credential and instance name.

    Reconstructed per call and never persisted. The resolver only builds one
    when all three of `api_url`, `api_key` and `instance_name` are present.

    Example:
        >>> from gateway.types import ResolvedConfig, SourceTier
        >>> ResolvedConfig(api_url="https://p.example", api_key="K", instance_name="otp-1",
        ...                source=SourceTier.GLOBAL)
    """

    model_config = ConfigDict(frozen=True)

    api_url: str
    api_key: str
    instance_name: str
    source: SourceTier
    tenant_id: Optional[str] = None

    @property
    def base_url(self) -> str:
        return self.api_url.rstrip("/")

    def masked(self) -> Dict[str, Any]:
        """Return a dict safe to show to operators (API key masked)."""
        data = self.model_dump(mode="json")
        data["api_key"] = mask_secret(self.api_key)
        return data


class GlobalConfig(BaseModel):
    """Deployment-wide provider account (`system_config.evolution_api`)."""

    api_url: Optional[str] = None
    api_key: Optional[str] = None
    instance_name: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url and self.api_key)

    @classmethod
    def from_value(cls, value: Dict[str, Any]) -> "GlobalConfig":
        return cls(
            api_url=value.get("api_url") or None,
            api_key=value.get("api_key") or None,
            instance_name=value.get("instance_name") or None,
        )


class TenantConfig(BaseModel):
    """Per-barbershop provider settings (`whatsapp_config` row).

    `api_url` and `api_key` are optional field-level overrides; when absent the
    global account's values are used.
    """

    api_url: Optional[str] = None
    api_key: Optional[str] = None
    instance_name: Optional[str] = None
    is_active: bool = False

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TenantConfig":
        cfg = row.get("config") or {}
        if not isinstance(cfg, dict):
            cfg = {}
        return cls(
            api_url=cfg.get("api_url") or None,
            api_key=cfg.get("api_key") or None,
            instance_name=cfg.get("instance_name") or None,
            is_active=bool(row.get("is_active")),
        )


class ResolveOptions(BaseModel):
    require_connected: bool = False
    skip_health_check: bool = False


def mask_secret(value: Optional[str], keep: int = 4) -> str:
    if not value:
        return ""
    if len(value) <= keep:
        return "*" * len(value)
    return f"{'*' * (len(value) - keep)}{value[-keep:]}"
