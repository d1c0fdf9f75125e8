"""Backing-store adapters for configuration reads and delivery logging."""

from .supabase_store import (
    SupabaseConfigStore,
    SupabaseDeliveryLog,
    create_supabase_client,
)

__all__ = [
    "SupabaseConfigStore",
    "SupabaseDeliveryLog",
    "create_supabase_client",
]
