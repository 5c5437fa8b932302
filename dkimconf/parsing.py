"""Shared value coercion helpers for configuration and tool settings."""

from __future__ import annotations

from typing import Mapping

from .errors import CoercionError


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive settings boolean and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_strict_boolean(value: str, key: str) -> bool:
    """Parse a DKIM option boolean: `true` or `false`, case-insensitive.

    Unlike `parse_permissive_boolean`, no other spellings and no surrounding
    whitespace are accepted, matching what the mail daemon itself accepts.

    Raises:
        CoercionError: If the value is neither `true` nor `false`.
    """

    token = value.lower()
    if token == "true":
        return True
    if token == "false":
        return False
    raise CoercionError(key=key, value=value)


def lookup_optional_boolean(assignments: Mapping[str, str], key: str) -> bool | None:
    """Return the coerced boolean for `key`, or `None` when the key is absent."""

    if key not in assignments:
        return None
    return parse_strict_boolean(assignments[key], key)
