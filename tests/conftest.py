from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from gateway.adapters import EvolutionClient
from gateway.config import Settings
from gateway.services import WhatsAppGateway, get_gateway
from gateway.types import DeliveryLogRecord
from server.config import Settings as ServerSettings
from server.config import get_settings as get_server_settings
from tests.fixtures.evolution_payloads import API_KEY, API_URL, DEFAULT_INSTANCE


class FakeConfigStore:
    """In-memory ConfigStore recording which keys were read."""

    def __init__(
        self,
        system: Optional[Dict[str, Dict[str, Any]]] = None,
        tenants: Optional[Dict[Tuple[str, str], Dict[str, Any]]] = None,
    ) -> None:
        self.system = dict(system or {})
        self.tenants = dict(tenants or {})
        self.system_reads: List[str] = []

    def get_system_value(self, key: str) -> Optional[Dict[str, Any]]:
        self.system_reads.append(key)
        return self.system.get(key)

    def get_tenant_config(self, tenant_id: str, provider: str) -> Optional[Dict[str, Any]]:
        return self.tenants.get((tenant_id, provider))

    def add_tenant(
        self,
        tenant_id: str,
        instance_name: str,
        *,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        is_active: bool = True,
    ) -> None:
        config: Dict[str, Any] = {"instance_name": instance_name}
        if api_url:
            config["api_url"] = api_url
        if api_key:
            config["api_key"] = api_key
        self.tenants[(tenant_id, "evolution")] = {"config": config, "is_active": is_active}


class FakeDeliveryLog:
    def __init__(self, fail: bool = False) -> None:
        self.records: List[DeliveryLogRecord] = []
        self.fail = fail

    def insert(self, record: DeliveryLogRecord) -> None:
        if self.fail:
            raise RuntimeError("log store unavailable")
        self.records.append(record)


@pytest.fixture()
def settings() -> Settings:
    return Settings(provider="evolution", country_prefix="55", request_timeout=5.0)


@pytest.fixture()
def store() -> FakeConfigStore:
    return FakeConfigStore(
        system={
            "evolution_api": {"api_url": API_URL, "api_key": API_KEY},
            "otp_whatsapp": {"instance_name": DEFAULT_INSTANCE},
        }
    )


@pytest.fixture()
def delivery_log() -> FakeDeliveryLog:
    return FakeDeliveryLog()


@pytest.fixture()
def evolution(settings: Settings) -> EvolutionClient:
    return EvolutionClient(settings)


@pytest.fixture()
def gateway(
    store: FakeConfigStore,
    delivery_log: FakeDeliveryLog,
    evolution: EvolutionClient,
    settings: Settings,
) -> WhatsAppGateway:
    return WhatsAppGateway(store, delivery_log, evolution, settings)


@pytest.fixture()
def client(gateway: WhatsAppGateway) -> Iterator[TestClient]:
    from server.app import app

    server_settings = ServerSettings(
        internal_api_token="internal-secret",
        operator_api_token="operator-secret",
    )
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_server_settings] = lambda: server_settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
