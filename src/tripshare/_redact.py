"""Helpers for safe debug logging.

Realtime frames carry free-form chat text and whatever else a client
decides to send. This module provides a small utility to redact message
bodies and bound the size of everything else before emitting DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "text",
        "message",
        "notes",
    }
)


def redact_for_log(value: Any, *, max_string: int = 128, max_items: int = 20, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 8:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS and isinstance(v, str):
                redacted[key] = f"<redacted:{len(v)}ch>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        items = [redact_for_log(v, max_string=max_string, max_items=max_items, _depth=_depth + 1) for v in value[:max_items]]
        if len(value) > max_items:
            items.append(f"<+{len(value) - max_items} more>")
        return items

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)
