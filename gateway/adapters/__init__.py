"""Messaging provider adapters."""

from .evolution import EvolutionClient, decode_instances, parse_connection_state
from .registry import AdapterRegistry

__all__ = [
    "AdapterRegistry",
    "EvolutionClient",
    "decode_instances",
    "parse_connection_state",
]
