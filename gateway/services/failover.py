from __future__ import annotations

import logging
from typing import Optional

from gateway.types import ErrorClass, LogContext, ResolveOptions, SendOutcome

from .dispatcher import MessageDispatcher
from .resolver import ConfigResolver

logger = logging.getLogger("gateway.failover")

NO_CONFIG_ERROR = "No WhatsApp configuration available"


class FailoverOrchestrator:
    """Send with automatic recovery from instance-class failures.

    At most one fallback hop: the primary attempt, then (only for
    `instance-error`) one attempt on another open instance. Other failure
    classes are returned unchanged.
    """

    def __init__(self, resolver: ConfigResolver, dispatcher: MessageDispatcher) -> None:
        self.resolver = resolver
        self.dispatcher = dispatcher

    def send_with_failover(
        self,
        tenant_id: Optional[str],
        to: str,
        text: str,
        context: Optional[LogContext] = None,
    ) -> SendOutcome:
        log_context = _with_tenant(context, tenant_id)

        config = self.resolver.resolve(tenant_id, ResolveOptions(require_connected=True))
        if config is None:
            fallback = self.resolver.find_connected_fallback()
            if fallback is None:
                logger.warning("No configuration available for tenant %s", tenant_id or "GLOBAL")
                return SendOutcome(
                    success=False,
                    error=NO_CONFIG_ERROR,
                    error_class=ErrorClass.NO_CONFIG,
                )
            return self.dispatcher.send(fallback, to, text, log_context)

        outcome = self.dispatcher.send(config, to, text, log_context)

        if not outcome.success and outcome.error_class == ErrorClass.INSTANCE_ERROR:
            logger.info("Primary send via %s failed, trying fallback", config.instance_name)
            fallback = self.resolver.find_connected_fallback(exclude_instance=config.instance_name)
            if fallback is not None:
                return self.dispatcher.send(fallback, to, text, log_context)

        return outcome


def _with_tenant(context: Optional[LogContext], tenant_id: Optional[str]) -> LogContext:
    if context is None:
        return LogContext(tenant_id=tenant_id)
    return context.model_copy(update={"tenant_id": tenant_id or context.tenant_id})
