"""Room membership and fan-out for realtime connections."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import Any, Protocol

from aiohttp import web

_logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Structural interface for one realtime client.

    The WebSocket endpoint wraps each socket in :class:`WebSocketConnection`;
    tests pass recording doubles. Implementations must be hashable by
    identity.
    """

    @property
    def connection_id(self) -> str:
        ...

    async def send_event(self, event: str, data: Any) -> None:
        ...


class WebSocketConnection:
    """A connected aiohttp WebSocket speaking ``{"event", "data"}`` frames."""

    def __init__(self, ws: web.WebSocketResponse, *, remote: str | None = None) -> None:
        self._ws = ws
        self._remote = remote
        self._connection_id = uuid.uuid4().hex[:12]

    def __repr__(self) -> str:
        return f"WebSocketConnection(id={self._connection_id}, remote={self._remote})"

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def closed(self) -> bool:
        return self._ws.closed

    async def send_event(self, event: str, data: Any) -> None:
        if self._ws.closed:
            raise ConnectionResetError(f"WebSocket {self._connection_id} is closed")
        await self._ws.send_str(json.dumps({"event": event, "data": data}, ensure_ascii=False))


class RoomBroadcaster:
    """Tracks which rooms each connection has joined and fans out events.

    Membership is kept in both directions so that a disconnect can drop a
    connection from every room without scanning all rooms.
    """

    def __init__(self) -> None:
        self._rooms: dict[str, set[Connection]] = {}
        self._memberships: dict[Connection, set[str]] = {}

    def join(self, connection: Connection, room: str) -> bool:
        """Add *connection* to *room*. Returns ``False`` if it was already a member."""
        members = self._rooms.setdefault(room, set())
        if connection in members:
            return False
        members.add(connection)
        self._memberships.setdefault(connection, set()).add(room)
        _logger.debug("Connection %s joined %s (%d members)", connection.connection_id, room, len(members))
        return True

    def leave(self, connection: Connection, room: str) -> bool:
        """Remove *connection* from *room*. Returns ``False`` if it was not a member."""
        members = self._rooms.get(room)
        if members is None or connection not in members:
            return False
        members.discard(connection)
        if not members:
            self._rooms.pop(room, None)

        rooms = self._memberships.get(connection)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                self._memberships.pop(connection, None)
        _logger.debug("Connection %s left %s", connection.connection_id, room)
        return True

    def disconnect(self, connection: Connection) -> set[str]:
        """Drop *connection* from every room; returns the rooms it was in."""
        rooms = self._memberships.pop(connection, set())
        for room in rooms:
            members = self._rooms.get(room)
            if members is None:
                continue
            members.discard(connection)
            if not members:
                self._rooms.pop(room, None)
        if rooms:
            _logger.debug("Connection %s disconnected from %s", connection.connection_id, sorted(rooms))
        return rooms

    def rooms_of(self, connection: Connection) -> frozenset[str]:
        return frozenset(self._memberships.get(connection, ()))

    def members(self, room: str) -> frozenset[Connection]:
        return frozenset(self._rooms.get(room, ()))

    @property
    def room_count(self) -> int:
        return len(self._rooms)

    async def send(self, connection: Connection, event: str, data: Any) -> bool:
        """Deliver one event to one connection.

        A connection that fails to accept the frame is disconnected and
        ``False`` is returned; the error is not propagated.
        """
        try:
            await connection.send_event(event, data)
        except (ConnectionError, RuntimeError):
            _logger.debug("Dropping connection %s after failed send of %s", connection.connection_id, event, exc_info=True)
            self.disconnect(connection)
            return False
        return True

    async def broadcast(self, room: str, event: str, data: Any) -> int:
        """Send *event* to every member of *room*; returns how many accepted it.

        *data* must already be JSON-ready. Members are captured before the
        first send, so connections joining mid-broadcast are not included.
        """
        members = list(self._rooms.get(room, ()))
        if not members:
            return 0
        results = await asyncio.gather(*(self.send(member, event, data) for member in members))
        delivered = sum(1 for ok in results if ok)
        _logger.debug("Broadcast %s to %s: %d/%d delivered", event, room, delivered, len(members))
        return delivered
