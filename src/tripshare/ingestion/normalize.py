"""Normalization helpers.

Centralizes defensive parsing of client-supplied values.
"""

from __future__ import annotations

import math
import time
from typing import Any


def now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def is_blank(value: Any) -> bool:
    """Return True when a required field should count as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def truncate(text: Any, limit: int) -> str:
    """Coerce *text* to ``str`` and keep at most *limit* characters."""
    if text is None:
        return ""
    return str(text)[:limit]
