from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

from gateway.config import Settings, get_settings
from gateway.types import (
    DeliveryLog,
    DeliveryLogRecord,
    DeliveryStatus,
    ErrorClass,
    LogContext,
    ProviderClient,
    ResolvedConfig,
    SendOutcome,
)
from gateway.utils import format_phone_number, phone_hint

logger = logging.getLogger("gateway.dispatcher")

# Provider error texts that mean the instance itself is missing or invalid.
INSTANCE_ERROR_MARKERS = ("instance", "nenhuma instância", "not found")


class MessageDispatcher:
    """Sends one text message through a resolved config and records the attempt.

    Never raises: HTTP rejections and transport failures are returned as a
    failed `SendOutcome`. When a `LogContext` is given, every attempt that
    reaches the provider is appended to the delivery log; log write failures
    are logged and otherwise ignored.
    """

    def __init__(
        self,
        provider_client: ProviderClient,
        delivery_log: Optional[DeliveryLog] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.provider_client = provider_client
        self.delivery_log = delivery_log
        self.settings = settings or get_settings()

    def send(
        self,
        config: ResolvedConfig,
        to: str,
        text: str,
        context: Optional[LogContext] = None,
    ) -> SendOutcome:
        number = format_phone_number(to, self.settings.country_prefix)
        t0 = time.time()
        logger.info("Sending message to %s via %s", phone_hint(number), config.instance_name)

        try:
            response = self.provider_client.send_text(config, number, text)
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.error(
                "Send exception via %s: %s",
                config.instance_name,
                error,
                extra={"latency_ms": int((time.time() - t0) * 1000)},
                exc_info=True,
            )
            self._record(
                context,
                number=number,
                text=text,
                status=DeliveryStatus.FAILED,
                error_message=error,
            )
            return SendOutcome(
                success=False,
                error=error,
                error_class=ErrorClass.EXCEPTION,
                instance_used=config.instance_name,
                source=config.source,
            )

        latency_ms = int((time.time() - t0) * 1000)

        if not response.ok:
            error = extract_error_message(response.body, response.status_code)
            error_class = classify_failure(response.status_code, error)
            logger.error(
                "Send failed via %s (HTTP %s, %s): %s",
                config.instance_name,
                response.status_code,
                error_class.value,
                error,
                extra={"latency_ms": latency_ms},
            )
            self._record(
                context,
                number=number,
                text=text,
                status=DeliveryStatus.FAILED,
                raw_response=response.body,
                error_message=error,
            )
            return SendOutcome(
                success=False,
                error=error,
                error_class=error_class,
                instance_used=config.instance_name,
                source=config.source,
            )

        message_id = extract_message_id(response.body)
        logger.info(
            "Message sent successfully: %s", message_id, extra={"latency_ms": latency_ms}
        )
        self._record(
            context,
            number=number,
            text=text,
            status=DeliveryStatus.SENT,
            provider_message_id=message_id,
            raw_response=response.body,
        )
        return SendOutcome(
            success=True,
            message_id=message_id,
            instance_used=config.instance_name,
            source=config.source,
        )

    def _record(
        self,
        context: Optional[LogContext],
        *,
        number: str,
        text: str,
        status: DeliveryStatus,
        provider_message_id: Optional[str] = None,
        raw_response: Any = None,
        error_message: Optional[str] = None,
    ) -> None:
        if context is None or self.delivery_log is None:
            return
        try:
            record = DeliveryLogRecord(
                tenant_id=context.tenant_id,
                recipient_address=number,
                recipient_name=context.recipient_name or self.settings.default_recipient_name,
                body=text,
                category=context.category,
                status=status,
                provider=self.settings.provider,
                provider_message_id=provider_message_id,
                related_entity_id=context.related_entity_id,
                actor_id=context.actor_id,
                raw_response=raw_response,
                error_message=error_message,
            )
            self.delivery_log.insert(record)
        except Exception:
            logger.exception("Error logging %s message", status.value)


def extract_error_message(body: Any, status_code: Optional[int] = None) -> str:
    """Human-readable error from a provider error body.

    Checks `message`, then `error`, then falls back to the serialised body.
    """
    if isinstance(body, dict):
        detail = body.get("message") or body.get("error")
        if detail is None:
            return json.dumps(body, ensure_ascii=False, default=str)
        return _stringify(detail)
    if isinstance(body, str) and body:
        return body
    if body is None:
        return f"HTTP {status_code}" if status_code is not None else "Unknown error"
    return json.dumps(body, ensure_ascii=False, default=str)


def _stringify(detail: Any) -> str:
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list):
        return "; ".join(_stringify(item) for item in detail)
    return json.dumps(detail, ensure_ascii=False, default=str)


def classify_failure(status_code: int, error: str) -> ErrorClass:
    if status_code == 404:
        return ErrorClass.INSTANCE_ERROR
    lowered = error.lower()
    if any(marker in lowered for marker in INSTANCE_ERROR_MARKERS):
        return ErrorClass.INSTANCE_ERROR
    return ErrorClass.SEND_FAILED


def extract_message_id(body: Any) -> Optional[str]:
    """Provider message id from `key.id`, `messageId` or `id`."""
    if not isinstance(body, dict):
        return None
    key = body.get("key")
    message_id = (key.get("id") if isinstance(key, dict) else None) or body.get("messageId") or body.get("id")
    return str(message_id) if message_id else None
