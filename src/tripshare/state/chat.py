"""Bounded per-trip chat history."""

from __future__ import annotations

import logging

from tripshare._constants import chat_room
from tripshare.ingestion.normalize import truncate
from tripshare.models.chat import ChatMessage
from tripshare.models.trip import Trip
from tripshare.realtime.broadcaster import RoomBroadcaster
from tripshare.realtime.events import OutboundEvent

_logger = logging.getLogger(__name__)


class ChatLog:
    """Appends chat messages with FIFO eviction and broadcasts each one.

    Parameters
    ----------
    broadcaster : RoomBroadcaster
        Where new messages are fanned out.
    history_limit : int
        Maximum messages kept per trip. Checked right after every append.
    text_limit : int
        Characters kept from each message; the rest is cut off.
    """

    def __init__(self, broadcaster: RoomBroadcaster, *, history_limit: int = 500, text_limit: int = 1000) -> None:
        self._broadcaster = broadcaster
        self._history_limit = history_limit
        self._text_limit = text_limit

    def append(self, trip: Trip, name: str, text: str) -> ChatMessage:
        """Store a message on *trip*, evicting the oldest beyond the limit."""
        message = ChatMessage(name=name, text=truncate(text, self._text_limit))
        trip.chat.append(message)
        overflow = len(trip.chat) - self._history_limit
        if overflow > 0:
            del trip.chat[:overflow]
            _logger.debug("Evicted %d chat message(s) from trip %s", overflow, trip.id)
        return message

    async def post(self, trip: Trip, name: str, text: str) -> ChatMessage:
        """Append a message and broadcast it alone to the trip's chat room."""
        message = self.append(trip, name, text)
        await self._broadcaster.broadcast(chat_room(trip.id), OutboundEvent.CHAT_MESSAGE, message.model_dump(mode="json"))
        return message
