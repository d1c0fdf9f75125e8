"""Utility functions for the WhatsApp gateway."""

from .phone import format_phone_number, phone_hint

__all__ = [
    "format_phone_number",
    "phone_hint",
]
