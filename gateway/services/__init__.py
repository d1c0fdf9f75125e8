"""Services package for the WhatsApp gateway."""

from .diagnostics import RESOLVER_VERSION, DiagnosticsAggregator
from .dispatcher import MessageDispatcher, classify_failure, extract_error_message, extract_message_id
from .failover import NO_CONFIG_ERROR, FailoverOrchestrator
from .gateway import WhatsAppGateway, get_gateway
from .resolver import ConfigResolver

__all__ = [
    "RESOLVER_VERSION",
    "NO_CONFIG_ERROR",
    "ConfigResolver",
    "MessageDispatcher",
    "FailoverOrchestrator",
    "DiagnosticsAggregator",
    "WhatsAppGateway",
    "get_gateway",
    "classify_failure",
    "extract_error_message",
    "extract_message_id",
]
