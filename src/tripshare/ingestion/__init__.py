"""Ingestion layer.

Helpers that turn client-supplied values into normalized domain values.
"""

__all__: list[str] = []
