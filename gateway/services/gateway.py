"""WhatsApp gateway: the operation surface consumed by server-side handlers.

Typical use from a booking-confirmation or OTP sender:

    from gateway.services import get_gateway
    from gateway.types import LogContext

    outcome = get_gateway().send_with_failover(
        barbershop_id, client_phone, text,
        LogContext(category="appointment_confirmation", related_entity_id=appointment_id),
    )
    if not outcome.success:
        ...  # notification not sent; the appointment itself stands
"""

from __future__ import annotations

from typing import Optional

from gateway.adapters.registry import AdapterRegistry
from gateway.config import Settings, get_settings
from gateway.stores import SupabaseConfigStore, SupabaseDeliveryLog, create_supabase_client
from gateway.types import (
    ConfigStore,
    DeliveryLog,
    DiagnosticsSnapshot,
    GlobalConfig,
    LogContext,
    ProviderClient,
    ResolvedConfig,
    ResolveOptions,
    SendOutcome,
)

from .diagnostics import DiagnosticsAggregator
from .dispatcher import MessageDispatcher
from .failover import FailoverOrchestrator
from .resolver import ConfigResolver


class WhatsAppGateway:
    """Wires the resolver, dispatcher, failover and diagnostics components.

    Holds only injected collaborators; every call re-reads configuration from
    the store.
    """

    def __init__(
        self,
        store: ConfigStore,
        delivery_log: Optional[DeliveryLog] = None,
        provider_client: Optional[ProviderClient] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.provider_client = provider_client or AdapterRegistry.get(
            self.settings.provider, self.settings
        )
        self.resolver = ConfigResolver(store, self.provider_client, self.settings)
        self.dispatcher = MessageDispatcher(self.provider_client, delivery_log, self.settings)
        self.orchestrator = FailoverOrchestrator(self.resolver, self.dispatcher)
        self.diagnostics = DiagnosticsAggregator(self.resolver, self.provider_client)

    def resolve_config(
        self,
        tenant_id: Optional[str] = None,
        options: Optional[ResolveOptions] = None,
    ) -> Optional[ResolvedConfig]:
        return self.resolver.resolve(tenant_id, options)

    def find_connected_fallback(self, exclude_instance: Optional[str] = None) -> Optional[ResolvedConfig]:
        return self.resolver.find_connected_fallback(exclude_instance)

    def send_message(
        self,
        config: ResolvedConfig,
        to: str,
        text: str,
        context: Optional[LogContext] = None,
    ) -> SendOutcome:
        return self.dispatcher.send(config, to, text, context)

    def send_with_failover(
        self,
        tenant_id: Optional[str],
        to: str,
        text: str,
        context: Optional[LogContext] = None,
    ) -> SendOutcome:
        return self.orchestrator.send_with_failover(tenant_id, to, text, context)

    def diagnose(self, tenant_id: Optional[str] = None) -> DiagnosticsSnapshot:
        return self.diagnostics.diagnose(tenant_id)

    def global_config(self) -> Optional[GlobalConfig]:
        return self.resolver.load_global_config()


# Global gateway instance (singleton)
_gateway: Optional[WhatsAppGateway] = None


def get_gateway() -> WhatsAppGateway:
    """Get or create the Supabase-backed gateway instance.

    Returns:
        WhatsAppGateway instance
    """
    global _gateway
    if _gateway is None:
        settings = get_settings()
        client = create_supabase_client(settings)
        _gateway = WhatsAppGateway(
            SupabaseConfigStore(client, settings),
            SupabaseDeliveryLog(client, settings),
            settings=settings,
        )
    return _gateway
