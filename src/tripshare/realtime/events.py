"""Realtime event names and the frame envelope.

Every WebSocket frame, in both directions, is a JSON object
``{"event": <name>, "data": <payload>}``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InboundEvent(StrEnum):
    JOIN_TRIP = "joinTrip"
    LOCATION_UPDATE = "locationUpdate"
    CHAT_JOIN = "chatJoin"
    CHAT_LEAVE = "chatLeave"
    CHAT_MESSAGE = "chatMessage"


class OutboundEvent(StrEnum):
    VEHICLES = "vehicles"
    SCHEDULE_UPDATE = "scheduleUpdate"
    CHAT_JOINED = "chatJoined"
    CHAT_LEFT = "chatLeft"
    CHAT_MESSAGE = "chatMessage"
    ERROR = "error"


# Event names used by the first web client.
_INBOUND_ALIASES: dict[str, InboundEvent] = {
    "locUpdate": InboundEvent.LOCATION_UPDATE,
    "chat:join": InboundEvent.CHAT_JOIN,
    "chat:leave": InboundEvent.CHAT_LEAVE,
    "chat:msg": InboundEvent.CHAT_MESSAGE,
}


def resolve_inbound(name: str) -> InboundEvent | None:
    """Map a frame's event name to an :class:`InboundEvent`, or ``None``."""
    alias = _INBOUND_ALIASES.get(name)
    if alias is not None:
        return alias
    try:
        return InboundEvent(name)
    except ValueError:
        return None


class EventFrame(BaseModel):
    """A decoded realtime frame."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    event: str
    data: Any = Field(default_factory=dict)

    @field_validator("event")
    @classmethod
    def _event_non_empty(cls, value: str) -> str:
        event = value.strip()
        if not event:
            raise ValueError("event must be non-empty")
        return event

    @field_validator("data", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value
