"""Config resolution: which provider instance to use for a tenant.

Hierarchy:
    1. The barbershop's own `whatsapp_config` row (active only). Missing
       `api_url`/`api_key` fields are inherited from the global account.
    2. The global account (`system_config.evolution_api`) paired with the
       default send instance (`system_config.otp_whatsapp`).

Resolution never raises; "nothing usable" is `None`. When a connected
instance is required, an unhealthy tenant instance silently falls through to
the global tier.
"""

from __future__ import annotations

import logging
from typing import Optional

from gateway.config import Settings, get_settings
from gateway.types import (
    ConfigStore,
    ConnectionState,
    GlobalConfig,
    ProviderClient,
    ResolvedConfig,
    ResolveOptions,
    SourceTier,
    TenantConfig,
)

logger = logging.getLogger("gateway.resolver")


class ConfigResolver:
    """Resolves tenant/global configuration and locates fallback instances."""

    def __init__(
        self,
        store: ConfigStore,
        provider_client: ProviderClient,
        settings: Optional[Settings] = None,
    ) -> None:
        self.store = store
        self.provider_client = provider_client
        self.settings = settings or get_settings()

    # --- Store reads ---
    def load_global_config(self) -> Optional[GlobalConfig]:
        value = self.store.get_system_value(self.settings.global_config_key)
        if not value:
            return None
        return GlobalConfig.from_value(value)

    def load_default_instance(self) -> Optional[str]:
        """Name of the global default send instance, if configured."""
        value = self.store.get_system_value(self.settings.default_instance_key)
        if not value:
            return None
        instance_name = value.get("instance_name")
        return instance_name if isinstance(instance_name, str) and instance_name else None

    def load_tenant_config(self, tenant_id: str) -> Optional[TenantConfig]:
        """Tenant row regardless of `is_active` (callers decide)."""
        row = self.store.get_tenant_config(tenant_id, self.settings.provider)
        if not row:
            return None
        return TenantConfig.from_row(row)

    # --- Resolution ---
    def resolve(
        self,
        tenant_id: Optional[str] = None,
        options: Optional[ResolveOptions] = None,
    ) -> Optional[ResolvedConfig]:
        options = options or ResolveOptions()
        check_health = options.require_connected and not options.skip_health_check

        logger.info("Resolving config for tenant: %s", tenant_id or "GLOBAL")

        if tenant_id:
            config = self._resolve_tenant(tenant_id)
            if config is not None:
                if not check_health:
                    logger.info("Using tenant config: %s", config.instance_name)
                    return config
                health = self.provider_client.check_instance_health(config)
                if health.connected:
                    logger.info("Using tenant config: %s", config.instance_name)
                    return config
                logger.info(
                    "Tenant instance %s not connected (state=%s), trying global",
                    config.instance_name,
                    health.state,
                )

        return self._resolve_global(check_health)

    def _resolve_tenant(self, tenant_id: str) -> Optional[ResolvedConfig]:
        tenant = self.load_tenant_config(tenant_id)
        if tenant is None or not tenant.is_active or not tenant.instance_name:
            return None

        api_url = tenant.api_url
        api_key = tenant.api_key
        if not api_url or not api_key:
            global_config = self.load_global_config()
            if global_config is not None:
                api_url = api_url or global_config.api_url
                api_key = api_key or global_config.api_key

        if not api_url or not api_key:
            logger.info("Tenant %s config incomplete, ignoring it", tenant_id)
            return None

        return ResolvedConfig(
            api_url=api_url,
            api_key=api_key,
            instance_name=tenant.instance_name,
            source=SourceTier.TENANT,
            tenant_id=tenant_id,
        )

    def _resolve_global(self, check_health: bool) -> Optional[ResolvedConfig]:
        global_config = self.load_global_config()
        if global_config is None or not global_config.is_configured:
            logger.info("No global Evolution API configured")
            return None

        instance_name = self.load_default_instance()
        if not instance_name:
            logger.info("No global default send instance configured")
            return None

        config = ResolvedConfig(
            api_url=global_config.api_url,  # type: ignore[arg-type]
            api_key=global_config.api_key,  # type: ignore[arg-type]
            instance_name=instance_name,
            source=SourceTier.GLOBAL,
        )

        if check_health and not self.provider_client.check_instance_health(config).connected:
            logger.info("Global instance %s not connected", instance_name)
            return None

        logger.info("Using global config: %s", instance_name)
        return config

    # --- Fallback ---
    def find_connected_fallback(
        self, exclude_instance: Optional[str] = None
    ) -> Optional[ResolvedConfig]:
        """First open instance on the global account other than `exclude_instance`.

        Only one hop is ever attempted by callers; instances tried in earlier
        rounds are not remembered.
        """
        logger.info("Searching for connected fallback instance")

        global_config = self.load_global_config()
        if global_config is None or not global_config.is_configured:
            return None

        instances = self.provider_client.fetch_instances(
            global_config.api_url,  # type: ignore[arg-type]
            global_config.api_key,  # type: ignore[arg-type]
        )
        for instance in instances:
            if instance.state == ConnectionState.OPEN.value and instance.name != exclude_instance:
                logger.info("Found fallback instance: %s", instance.name)
                return ResolvedConfig(
                    api_url=global_config.api_url,  # type: ignore[arg-type]
                    api_key=global_config.api_key,  # type: ignore[arg-type]
                    instance_name=instance.name,
                    source=SourceTier.GLOBAL,
                )

        logger.info("No fallback instance found")
        return None
