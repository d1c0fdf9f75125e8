"""Phone number helpers for the WhatsApp provider."""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")

# National numbers (area code + subscriber) are at most 11 digits in Brazil;
# anything longer is assumed to already carry a country code.
_MAX_NATIONAL_DIGITS = 11


def format_phone_number(phone: str, country_prefix: str = "55") -> str:
    """Canonicalize a raw phone string into the provider's address format.

    Strips every non-digit, then prepends `country_prefix` when the result does
    not already start with it and is at most 11 digits long. No validation is
    performed; pathological input yields a pathological (but digits-only) string.

    >>> format_phone_number("(11) 99999-9999")
    '5511999999999'
    >>> format_phone_number("+55 11 99999-9999")
    '5511999999999'
    """
    digits = _NON_DIGITS.sub("", phone or "")
    if not digits.startswith(country_prefix) and len(digits) <= _MAX_NATIONAL_DIGITS:
        digits = country_prefix + digits
    return digits


def phone_hint(value: str, keep: int = 4) -> str:
    """Return a log-safe hint of a destination (last digits only)."""
    value = (value or "").strip()
    if not value:
        return ""
    if len(value) <= keep:
        return value
    return f"...{value[-keep:]}"
