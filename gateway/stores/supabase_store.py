"""Supabase-backed implementations of the ConfigStore and DeliveryLog ports.

Reads look up `system_config` by key and
`whatsapp_config` by barbershop + provider. Read errors are logged and
reported as "absent" so resolution simply moves on to the next tier.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from gateway.config import Settings, get_settings
from gateway.types import ConfigStore, DeliveryLog, DeliveryLogRecord

logger = logging.getLogger("gateway.store")

# Older postgrest clients signal an empty maybe_single() result this way.
_NO_ROWS = "204"


def create_supabase_client(settings: Optional[Settings] = None) -> Client:
    """Create a service-role Supabase client (bypasses row-level security)."""
    settings = settings or get_settings()
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise RuntimeError(
            "Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY environment variables"
        )
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


class SupabaseConfigStore(ConfigStore):
    """Configuration reads against `system_config` and `whatsapp_config`."""

    def __init__(self, client: Client, settings: Optional[Settings] = None) -> None:
        self.client = client
        self.settings = settings or get_settings()

    def get_system_value(self, key: str) -> Optional[Dict[str, Any]]:  # type: ignore[override]
        try:
            response = (
                self.client.table(self.settings.system_config_table)
                .select("value")
                .eq("key", key)
                .maybe_single()
                .execute()
            )
        except APIError as e:
            if str(e.code) != _NO_ROWS:
                logger.error("Error reading system_config[%s]: %s", key, e)
            return None
        except Exception:
            logger.exception("Error reading system_config[%s]", key)
            return None

        # maybe_single() yields no response at all when the row is missing
        if response is None or not response.data:
            return None
        value = response.data.get("value")
        return value if isinstance(value, dict) else None

    def get_tenant_config(self, tenant_id: str, provider: str) -> Optional[Dict[str, Any]]:  # type: ignore[override]
        try:
            response = (
                self.client.table(self.settings.tenant_config_table)
                .select("config, is_active")
                .eq("barbershop_id", tenant_id)
                .eq("provider", provider)
                .maybe_single()
                .execute()
            )
        except APIError as e:
            if str(e.code) != _NO_ROWS:
                logger.error("Error reading whatsapp_config for %s: %s", tenant_id, e)
            return None
        except Exception:
            logger.exception("Error reading whatsapp_config for %s", tenant_id)
            return None

        if response is None or not response.data:
            return None
        return response.data


class SupabaseDeliveryLog(DeliveryLog):
    """Append-only inserts into `whatsapp_logs`."""

    def __init__(self, client: Client, settings: Optional[Settings] = None) -> None:
        self.client = client
        self.settings = settings or get_settings()

    def insert(self, record: DeliveryLogRecord) -> None:  # type: ignore[override]
        self.client.table(self.settings.delivery_log_table).insert(
            record.to_row()
        ).execute()
