"""Realtime layer: room membership, fan-out and inbound event handling."""
