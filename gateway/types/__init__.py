"""Core types for the WhatsApp gateway.

This package centralizes enums, configuration values, results, delivery
records, diagnostics and the ports (store/log/provider protocols). Most
modules should import types from here rather than from submodules.

Usage:
    from gateway.types import ResolvedConfig, SendOutcome, ErrorClass
"""

from .enums import ConnectionState, DeliveryStatus, ErrorClass, SourceTier
from .config import GlobalConfig, ResolvedConfig, ResolveOptions, TenantConfig, mask_secret
from .results import HealthVerdict, InstanceSummary, ProviderResponse, SendOutcome
from .records import DeliveryLogRecord, LogContext
from .diagnostics import (
    DiagnosticsSnapshot,
    GlobalConfigSummary,
    InstanceState,
    TenantConfigSummary,
)
from .protocols import ConfigStore, DeliveryLog, ProviderClient
from .api import GlobalConfigResponse, SendMessageRequest

__all__ = [
    "SourceTier",
    "ErrorClass",
    "DeliveryStatus",
    "ConnectionState",
    "ResolvedConfig",
    "GlobalConfig",
    "TenantConfig",
    "ResolveOptions",
    "mask_secret",
    "HealthVerdict",
    "InstanceSummary",
    "ProviderResponse",
    "SendOutcome",
    "LogContext",
    "DeliveryLogRecord",
    "DiagnosticsSnapshot",
    "GlobalConfigSummary",
    "TenantConfigSummary",
    "InstanceState",
    "ConfigStore",
    "DeliveryLog",
    "ProviderClient",
    "SendMessageRequest",
    "GlobalConfigResponse",
]
