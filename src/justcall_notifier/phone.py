"""E.164 phone number validation."""

from __future__ import annotations

import re

__all__ = ["E164_PATTERN", "is_e164"]

# "+", a non-zero country digit, then 1-14 more digits. ASCII only.
E164_PATTERN = re.compile(r"\+[1-9][0-9]{1,14}")


def is_e164(value: str) -> bool:
    """Return True if *value* is exactly an E.164 number (no surrounding whitespace)."""
    return E164_PATTERN.fullmatch(value) is not None
