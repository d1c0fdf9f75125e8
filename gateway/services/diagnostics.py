from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional

from gateway.types import (
    DiagnosticsSnapshot,
    GlobalConfigSummary,
    HealthVerdict,
    InstanceState,
    InstanceSummary,
    ProviderClient,
    ResolveOptions,
    SourceTier,
    TenantConfigSummary,
)

from .resolver import ConfigResolver

logger = logging.getLogger("gateway.diagnostics")

RESOLVER_VERSION = "2025-01-02.resolver-v1"


class DiagnosticsAggregator:
    """Assembles a read-only snapshot of the resolver's inputs and verdicts.

    Store reads and the skip-health resolution run concurrently; the health
    probe and the inventory listing run once those are known.
    """

    def __init__(self, resolver: ConfigResolver, provider_client: ProviderClient) -> None:
        self.resolver = resolver
        self.provider_client = provider_client

    def diagnose(self, tenant_id: Optional[str] = None) -> DiagnosticsSnapshot:
        logger.info("Running diagnostics for tenant: %s", tenant_id or "GLOBAL")

        with ThreadPoolExecutor(max_workers=4) as pool:
            global_future = pool.submit(self.resolver.load_global_config)
            default_future = pool.submit(self.resolver.load_default_instance)
            tenant_future = (
                pool.submit(self.resolver.load_tenant_config, tenant_id) if tenant_id else None
            )
            resolved_future = pool.submit(
                self.resolver.resolve, tenant_id, ResolveOptions(skip_health_check=True)
            )
            global_config = global_future.result()
            default_instance = default_future.result()
            tenant_config = tenant_future.result() if tenant_future is not None else None
            resolved = resolved_future.result()

        health_future: Optional[Future[HealthVerdict]] = None
        inventory_future: Optional[Future[List[InstanceSummary]]] = None
        with ThreadPoolExecutor(max_workers=2) as pool:
            if resolved is not None:
                health_future = pool.submit(self.provider_client.check_instance_health, resolved)
            if global_config is not None and global_config.is_configured:
                inventory_future = pool.submit(
                    self.provider_client.fetch_instances,
                    global_config.api_url,
                    global_config.api_key,
                )
            health = health_future.result() if health_future is not None else None
            instances = inventory_future.result() if inventory_future is not None else []

        tenant_summary: Optional[TenantConfigSummary] = None
        if tenant_id:
            tenant_summary = TenantConfigSummary(
                has_own_config=tenant_config is not None,
                instance_name=tenant_config.instance_name if tenant_config else None,
                is_active=tenant_config.is_active if tenant_config else False,
            )

        return DiagnosticsSnapshot(
            resolver_version=RESOLVER_VERSION,
            global_config=GlobalConfigSummary(
                evolution_api_configured=bool(global_config and global_config.is_configured),
                api_url=global_config.api_url if global_config else None,
                default_instance_configured=default_instance is not None,
                default_instance_name=default_instance,
            ),
            tenant_config=tenant_summary,
            resolved_config=resolved.masked() if resolved is not None else None,
            instance_health=health,
            tenant_fallthrough=bool(
                resolved is not None
                and resolved.source == SourceTier.TENANT
                and health is not None
                and not health.connected
            ),
            all_instances=[InstanceState(name=i.name, state=i.state) for i in instances],
        )
