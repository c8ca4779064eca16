"""
Shared parsing helpers

Provides:
- Host id sanitizing: reducing hostnames to the ``[a-zA-Z0-9_-]`` topic alphabet
- Strict payload parsers for MQTT commands (percentages, boolean literals)
- Env-style parsers with fallback defaults, used by the config loader
"""

from __future__ import annotations

import re

_HOST_ID_INVALID = re.compile(r"[^a-zA-Z0-9_-]+")
_DECIMAL_INT = re.compile(r"[+-]?[0-9]+")

# Literals accepted for boolean payloads, matching strconv.ParseBool-style input
_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def sanitize_host_id(hostname: str) -> str:
    """Drop the domain suffix and every character outside ``[a-zA-Z0-9_-]``.

    Example: ``"Jane's MacBook.local"`` -> ``"JanesMacBook"``
    """
    first_part = hostname.split(".", 1)[0]
    return _HOST_ID_INVALID.sub("", first_part)


def parse_percent(value: str | None) -> int | None:
    """Parse a decimal integer payload in the inclusive 0-100 range.

    Returns None for anything else; callers decide how to report it.
    """
    if value is None:
        return None
    if not _DECIMAL_INT.fullmatch(value):
        return None
    number = int(value, 10)
    if number < 0 or number > 100:
        return None
    return number


def parse_bool_literal(value: str | None) -> bool | None:
    """Parse a boolean payload such as ``true``/``false``; None when unrecognized."""
    if value is None:
        return None
    if value in _TRUE_LITERALS:
        return True
    if value in _FALSE_LITERALS:
        return False
    return None


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def parse_bool(value: object, default: bool = False) -> bool:
    """Interpret env-style booleans (also accepts real bools from YAML)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def parse_int(value: object, default: int) -> int:
    """Best-effort int parser with fallback."""
    if value is None:
        return default
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return default
