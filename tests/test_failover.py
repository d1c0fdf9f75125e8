from __future__ import annotations

import json

import httpx
import respx

from gateway.services import NO_CONFIG_ERROR, WhatsAppGateway
from gateway.types import DeliveryStatus, ErrorClass, LogContext, SourceTier
from tests.conftest import FakeConfigStore, FakeDeliveryLog
from tests.fixtures.evolution_payloads import (
    DEFAULT_INSTANCE,
    connection_state,
    connection_state_url,
    fetch_instances_url,
    instance_entry,
    send_text_url,
    sent_message,
)

TENANT = "shop-1"


@respx.mock
def test_end_to_end_global_send(gateway: WhatsAppGateway, delivery_log: FakeDeliveryLog) -> None:
    respx.get(connection_state_url(DEFAULT_INSTANCE)).mock(
        return_value=httpx.Response(200, json=connection_state("open"))
    )
    send = respx.post(send_text_url(DEFAULT_INSTANCE)).mock(
        return_value=httpx.Response(200, json={"key": {"id": "abc"}})
    )

    outcome = gateway.send_with_failover(None, "+551199999999", "hi")

    assert send.call_count == 1
    assert json.loads(send.calls.last.request.content.decode()) == {
        "number": "551199999999",
        "text": "hi",
    }
    assert outcome.success is True
    assert outcome.message_id == "abc"
    assert outcome.instance_used == DEFAULT_INSTANCE
    assert outcome.source == SourceTier.GLOBAL
    assert [r.status for r in delivery_log.records] == [DeliveryStatus.SENT]


@respx.mock
def test_instance_error_fails_over_once(
    gateway: WhatsAppGateway, store: FakeConfigStore, delivery_log: FakeDeliveryLog
) -> None:
    store.add_tenant(TENANT, "shop-a")
    respx.get(connection_state_url("shop-a")).mock(
        return_value=httpx.Response(200, json=connection_state("open"))
    )
    primary = respx.post(send_text_url("shop-a")).mock(
        return_value=httpx.Response(400, json={"message": "instance shop-a does not exist"})
    )
    respx.get(fetch_instances_url()).mock(
        return_value=httpx.Response(
            200, json=[instance_entry("shop-a", "open"), instance_entry("shop-b", "open")]
        )
    )
    secondary = respx.post(send_text_url("shop-b")).mock(
        return_value=httpx.Response(200, json=sent_message("m-b"))
    )

    outcome = gateway.send_with_failover(
        TENANT, "11999999999", "Lembrete", LogContext(category="reminder")
    )

    assert primary.call_count == 1
    assert secondary.call_count == 1
    assert outcome.success is True
    assert outcome.instance_used == "shop-b"
    assert outcome.source == SourceTier.GLOBAL
    assert outcome.message_id == "m-b"

    assert [r.status for r in delivery_log.records] == [DeliveryStatus.FAILED, DeliveryStatus.SENT]
    assert all(r.tenant_id == TENANT for r in delivery_log.records)
    assert all(r.category == "reminder" for r in delivery_log.records)


@respx.mock
def test_instance_error_without_fallback_returns_primary_failure(gateway: WhatsAppGateway) -> None:
    respx.get(connection_state_url(DEFAULT_INSTANCE)).mock(
        return_value=httpx.Response(200, json=connection_state("open"))
    )
    respx.post(send_text_url(DEFAULT_INSTANCE)).mock(
        return_value=httpx.Response(404, json={"error": "Not Found"})
    )
    respx.get(fetch_instances_url()).mock(
        return_value=httpx.Response(200, json=[instance_entry(DEFAULT_INSTANCE, "open")])
    )

    outcome = gateway.send_with_failover(None, "11999999999", "hi")

    assert outcome.success is False
    assert outcome.error_class == ErrorClass.INSTANCE_ERROR
    assert outcome.instance_used == DEFAULT_INSTANCE


@respx.mock
def test_send_failed_is_not_retried(gateway: WhatsAppGateway) -> None:
    respx.get(connection_state_url(DEFAULT_INSTANCE)).mock(
        return_value=httpx.Response(200, json=connection_state("open"))
    )
    send = respx.post(send_text_url(DEFAULT_INSTANCE)).mock(
        return_value=httpx.Response(400, json={"message": "Invalid number format"})
    )
    inventory = respx.get(fetch_instances_url())

    outcome = gateway.send_with_failover(None, "11999999999", "hi")

    assert send.call_count == 1
    assert not inventory.called
    assert outcome.error_class == ErrorClass.SEND_FAILED


@respx.mock
def test_exception_is_not_retried(gateway: WhatsAppGateway) -> None:
    respx.get(connection_state_url(DEFAULT_INSTANCE)).mock(
        return_value=httpx.Response(200, json=connection_state("open"))
    )
    respx.post(send_text_url(DEFAULT_INSTANCE)).mock(side_effect=httpx.ReadTimeout("slow"))
    inventory = respx.get(fetch_instances_url())

    outcome = gateway.send_with_failover(None, "11999999999", "hi")

    assert not inventory.called
    assert outcome.success is False
    assert outcome.error_class == ErrorClass.EXCEPTION


@respx.mock
def test_unresolvable_config_uses_fallback_directly(
    gateway: WhatsAppGateway, delivery_log: FakeDeliveryLog
) -> None:
    respx.get(connection_state_url(DEFAULT_INSTANCE)).mock(
        return_value=httpx.Response(200, json=connection_state("close"))
    )
    respx.get(fetch_instances_url()).mock(
        return_value=httpx.Response(200, json={"x": instance_entry("spare", "open")})
    )
    send = respx.post(send_text_url("spare")).mock(
        return_value=httpx.Response(200, json=sent_message("s1"))
    )

    outcome = gateway.send_with_failover(None, "11999999999", "hi")

    assert send.call_count == 1
    assert outcome.success is True
    assert outcome.instance_used == "spare"


@respx.mock
def test_no_config_anywhere_never_calls_send(settings) -> None:  # type: ignore[no-untyped-def]
    send = respx.post(url__regex=r".*/message/sendText/.*")
    delivery_log = FakeDeliveryLog()
    gateway = WhatsAppGateway(FakeConfigStore(), delivery_log, settings=settings)

    outcome = gateway.send_with_failover("shop-1", "11999999999", "hi")

    assert not send.called
    assert outcome.success is False
    assert outcome.error_class == ErrorClass.NO_CONFIG
    assert outcome.error == NO_CONFIG_ERROR
    assert outcome.instance_used is None
    assert delivery_log.records == []
