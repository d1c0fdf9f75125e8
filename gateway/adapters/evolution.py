from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from gateway.config import Settings, get_settings
from gateway.types import (
    ConnectionState,
    HealthVerdict,
    InstanceSummary,
    ProviderClient,
    ProviderResponse,
    ResolvedConfig,
)

logger = logging.getLogger("gateway.evolution")

# fetchInstances answers with either a JSON array of instance objects or an
# object keyed by arbitrary strings; decode the array shape first.
_ARRAY_SHAPE = TypeAdapter(List[Any])
_MAP_SHAPE = TypeAdapter(Dict[str, Any])


class EvolutionClient(ProviderClient):
    """Evolution API adapter implementing the ProviderClient protocol.

    Covers the three calls the gateway needs: per-instance connection state,
    account-wide instance enumeration and plain text sends. Every request is
    bounded by `settings.request_timeout`.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.timeout = self.settings.request_timeout

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "apikey": api_key,
            "Content-Type": "application/json",
        }

    # --- Health ---
    def check_instance_health(self, config: ResolvedConfig) -> HealthVerdict:  # type: ignore[override]
        """Query one instance's connection state; never raises."""
        url = f"{config.base_url}/instance/connectionState/{config.instance_name}"
        logger.debug("Checking health of instance %s", config.instance_name)

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, headers=self._headers(config.api_key))
        except Exception as e:
            logger.warning("Health check for %s failed: %s", config.instance_name, e)
            return HealthVerdict(state=ConnectionState.ERROR.value)

        if response.status_code == 404:
            return HealthVerdict(state=ConnectionState.NOT_FOUND.value)
        if not response.is_success:
            logger.warning(
                "Health check for %s returned HTTP %s", config.instance_name, response.status_code
            )
            return HealthVerdict(state=ConnectionState.ERROR.value)

        try:
            data = response.json()
        except ValueError:
            return HealthVerdict(state=ConnectionState.ERROR.value)

        verdict = parse_connection_state(data)
        logger.info("Instance %s state: %s", config.instance_name, verdict.state)
        return verdict

    # --- Inventory ---
    def fetch_instances(self, api_url: str, api_key: str) -> List[InstanceSummary]:  # type: ignore[override]
        """List every instance on the account; empty list on any failure."""
        url = f"{api_url.rstrip('/')}/instance/fetchInstances"

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, headers=self._headers(api_key))
        except Exception as e:
            logger.error("fetchInstances error: %s", e)
            return []

        if not response.is_success:
            logger.error("fetchInstances failed: HTTP %s", response.status_code)
            return []

        try:
            data = response.json()
        except ValueError:
            logger.error("fetchInstances returned a non-JSON body")
            return []

        instances = decode_instances(data)
        logger.info("Found %d instances", len(instances))
        return instances

    # --- Outbound ---
    def send_text(self, config: ResolvedConfig, number: str, text: str) -> ProviderResponse:  # type: ignore[override]
        """POST a text message; transport errors propagate to the caller."""
        url = f"{config.base_url}/message/sendText/{config.instance_name}"
        payload = {"number": number, "text": text}

        with httpx.Client(timeout=self.timeout) as client:
            response = client.post(url, headers=self._headers(config.api_key), json=payload)

        try:
            body: Any = response.json()
        except ValueError:
            body = response.text
        return ProviderResponse(status_code=response.status_code, body=body)


def parse_connection_state(data: Any) -> HealthVerdict:
    """Build a verdict from a connectionState body (flat or nested under `instance`)."""
    if not isinstance(data, dict):
        return HealthVerdict(state=ConnectionState.UNKNOWN.value)

    nested = data.get("instance")
    if not isinstance(nested, dict):
        nested = {}

    state = data.get("state") or nested.get("state") or ConnectionState.UNKNOWN.value
    owner_jid = nested.get("ownerJid") or data.get("ownerJid")
    if not isinstance(owner_jid, str) or not owner_jid:
        owner_jid = None

    return HealthVerdict(
        state=str(state),
        owner_jid=owner_jid,
        phone_number=owner_jid.split("@", 1)[0] if owner_jid else None,
    )


def decode_instances(data: Any) -> List[InstanceSummary]:
    """Normalize a fetchInstances body into a flat list, skipping bad entries."""
    try:
        entries = _ARRAY_SHAPE.validate_python(data, strict=True)
    except ValidationError:
        try:
            entries = list(_MAP_SHAPE.validate_python(data, strict=True).values())
        except ValidationError:
            logger.warning("Unrecognized fetchInstances shape: %s", type(data).__name__)
            return []

    instances: List[InstanceSummary] = []
    for entry in entries:
        summary = _summarize_instance(entry)
        if summary is not None:
            instances.append(summary)
    return instances


def _summarize_instance(entry: Any) -> Optional[InstanceSummary]:
    if not isinstance(entry, dict):
        return None

    nested = entry.get("instance")
    if not isinstance(nested, dict):
        nested = {}

    name = entry.get("instanceName") or entry.get("name") or nested.get("instanceName")
    if not isinstance(name, str) or not name:
        return None

    state = (
        entry.get("connectionStatus")
        or entry.get("state")
        or nested.get("state")
        or nested.get("status")
        or ConnectionState.UNKNOWN.value
    )
    owner_jid = entry.get("ownerJid") or nested.get("ownerJid")

    return InstanceSummary(
        name=name,
        state=str(state),
        owner_jid=owner_jid if isinstance(owner_jid, str) else None,
    )
