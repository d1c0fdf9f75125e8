from __future__ import annotations

import os
from dataclasses import dataclass


def _env_float(name: str, fallback: float) -> float:
    try:
        return float(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


@dataclass(frozen=True)
class Settings:
    environment: str = os.getenv("ENV", "dev")
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    provider: str = os.getenv("WHATSAPP_PROVIDER", "evolution")
    country_prefix: str = os.getenv("WHATSAPP_COUNTRY_PREFIX", "55")
    request_timeout: float = _env_float("WHATSAPP_HTTP_TIMEOUT", 15.0)
    default_recipient_name: str = os.getenv("WHATSAPP_DEFAULT_RECIPIENT_NAME", "Desconhecido")

    # system_config keys
    global_config_key: str = "evolution_api"
    default_instance_key: str = "otp_whatsapp"

    # tables
    system_config_table: str = "system_config"
    tenant_config_table: str = "whatsapp_config"
    delivery_log_table: str = "whatsapp_logs"


def get_settings() -> Settings:
    return Settings()
