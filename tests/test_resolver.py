from __future__ import annotations

import httpx
import respx

from gateway.services import WhatsAppGateway
from gateway.types import ResolveOptions, SourceTier
from tests.conftest import FakeConfigStore
from tests.fixtures.evolution_payloads import (
    API_KEY,
    API_URL,
    DEFAULT_INSTANCE,
    connection_state,
    connection_state_url,
    fetch_instances_url,
    instance_entry,
)

TENANT = "shop-1"
TENANT_URL = "https://tenant-evo.example.com"


def test_global_resolution_without_tenant(gateway: WhatsAppGateway) -> None:
    config = gateway.resolve_config()

    assert config is not None
    assert config.source == SourceTier.GLOBAL
    assert config.instance_name == DEFAULT_INSTANCE
    assert config.api_url == API_URL
    assert config.api_key == API_KEY
    assert config.tenant_id is None


def test_tenant_with_full_credentials_skips_global_lookup(
    gateway: WhatsAppGateway, store: FakeConfigStore
) -> None:
    store.add_tenant(TENANT, "shop-1-wa", api_url=TENANT_URL, api_key="tenant-key")

    config = gateway.resolve_config(TENANT)

    assert config is not None
    assert config.source == SourceTier.TENANT
    assert config.instance_name == "shop-1-wa"
    assert config.api_url == TENANT_URL
    assert config.api_key == "tenant-key"
    assert config.tenant_id == TENANT
    assert store.system_reads == []


def test_tenant_inherits_missing_fields_from_global(
    gateway: WhatsAppGateway, store: FakeConfigStore
) -> None:
    store.add_tenant(TENANT, "shop-1-wa")

    config = gateway.resolve_config(TENANT)

    assert config is not None
    assert config.source == SourceTier.TENANT
    assert config.api_url == API_URL
    assert config.api_key == API_KEY
    assert config.instance_name == "shop-1-wa"


def test_inactive_tenant_falls_back_to_global(
    gateway: WhatsAppGateway, store: FakeConfigStore
) -> None:
    store.add_tenant(TENANT, "shop-1-wa", is_active=False)

    config = gateway.resolve_config(TENANT)

    assert config is not None
    assert config.source == SourceTier.GLOBAL
    assert config.instance_name == DEFAULT_INSTANCE


def test_incomplete_tenant_is_treated_as_absent(settings) -> None:  # type: ignore[no-untyped-def]
    store = FakeConfigStore(system={"otp_whatsapp": {"instance_name": DEFAULT_INSTANCE}})
    store.add_tenant(TENANT, "shop-1-wa", api_url=TENANT_URL)
    gateway = WhatsAppGateway(store, settings=settings)

    assert gateway.resolve_config(TENANT) is None


@respx.mock
def test_connected_tenant_is_returned_when_required(
    gateway: WhatsAppGateway, store: FakeConfigStore
) -> None:
    store.add_tenant(TENANT, "shop-1-wa", api_url=TENANT_URL, api_key="tenant-key")
    route = respx.get(connection_state_url("shop-1-wa", TENANT_URL)).mock(
        return_value=httpx.Response(200, json=connection_state("open"))
    )

    config = gateway.resolve_config(TENANT, ResolveOptions(require_connected=True))

    assert route.call_count == 1
    assert config is not None
    assert config.source == SourceTier.TENANT
    assert store.system_reads == []


@respx.mock
def test_disconnected_tenant_falls_through_to_global(
    gateway: WhatsAppGateway, store: FakeConfigStore
) -> None:
    store.add_tenant(TENANT, "shop-1-wa")
    respx.get(connection_state_url("shop-1-wa")).mock(
        return_value=httpx.Response(200, json=connection_state("close"))
    )
    respx.get(connection_state_url(DEFAULT_INSTANCE)).mock(
        return_value=httpx.Response(200, json=connection_state("open"))
    )

    config = gateway.resolve_config(TENANT, ResolveOptions(require_connected=True))

    assert config is not None
    assert config.source == SourceTier.GLOBAL
    assert config.instance_name == DEFAULT_INSTANCE


@respx.mock
def test_disconnected_global_resolves_to_nothing(gateway: WhatsAppGateway) -> None:
    respx.get(connection_state_url(DEFAULT_INSTANCE)).mock(
        return_value=httpx.Response(404, json={"error": "Not Found"})
    )

    assert gateway.resolve_config(options=ResolveOptions(require_connected=True)) is None


@respx.mock
def test_skip_health_check_never_probes(gateway: WhatsAppGateway, store: FakeConfigStore) -> None:
    store.add_tenant(TENANT, "shop-1-wa")
    route = respx.get(url__regex=r".*/instance/connectionState/.*")

    config = gateway.resolve_config(
        TENANT, ResolveOptions(require_connected=True, skip_health_check=True)
    )

    assert not route.called
    assert config is not None
    assert config.source == SourceTier.TENANT


def test_missing_global_credentials_resolves_to_nothing(settings) -> None:  # type: ignore[no-untyped-def]
    store = FakeConfigStore(
        system={
            "evolution_api": {"api_url": API_URL},
            "otp_whatsapp": {"instance_name": DEFAULT_INSTANCE},
        }
    )
    gateway = WhatsAppGateway(store, settings=settings)

    assert gateway.resolve_config() is None


def test_missing_default_instance_resolves_to_nothing(settings) -> None:  # type: ignore[no-untyped-def]
    store = FakeConfigStore(
        system={"evolution_api": {"api_url": API_URL, "api_key": API_KEY, "instance_name": "admin"}}
    )
    gateway = WhatsAppGateway(store, settings=settings)

    assert gateway.resolve_config() is None


# --- Fallback locator ---


@respx.mock
def test_fallback_picks_first_open_instance_not_excluded(gateway: WhatsAppGateway) -> None:
    respx.get(fetch_instances_url()).mock(
        return_value=httpx.Response(
            200,
            json=[
                instance_entry("otp-1", "open"),
                instance_entry("shop-b", "close"),
                instance_entry("shop-c", "open"),
                instance_entry("shop-d", "open"),
            ],
        )
    )

    fallback = gateway.find_connected_fallback(exclude_instance="otp-1")

    assert fallback is not None
    assert fallback.instance_name == "shop-c"
    assert fallback.source == SourceTier.GLOBAL
    assert fallback.api_url == API_URL
    assert fallback.api_key == API_KEY


@respx.mock
def test_fallback_none_when_nothing_open(gateway: WhatsAppGateway) -> None:
    respx.get(fetch_instances_url()).mock(
        return_value=httpx.Response(200, json=[instance_entry("otp-1", "open")])
    )

    assert gateway.find_connected_fallback(exclude_instance="otp-1") is None


@respx.mock
def test_fallback_without_global_config_never_enumerates(settings) -> None:  # type: ignore[no-untyped-def]
    route = respx.get(url__regex=r".*/instance/fetchInstances")
    gateway = WhatsAppGateway(FakeConfigStore(), settings=settings)

    assert gateway.find_connected_fallback() is None
    assert not route.called
