"""Inbound realtime event handling.

One :class:`RealtimeHandlers` instance serves every connection; the
per-connection bits (chat display name) live in :class:`ConnectionState`
and room membership lives in the :class:`RoomBroadcaster`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from tripshare._constants import chat_room, trip_room
from tripshare._redact import redact_for_log
from tripshare.models.requests import (
    ChatJoinPayload,
    ChatLeavePayload,
    ChatMessagePayload,
    JoinTripPayload,
    PositionReport,
)
from tripshare.realtime.broadcaster import Connection, RoomBroadcaster
from tripshare.realtime.events import EventFrame, InboundEvent, OutboundEvent, resolve_inbound
from tripshare.state.chat import ChatLog
from tripshare.state.store import TripStore
from tripshare.state.vehicles import VehicleRegistry

_logger = logging.getLogger(__name__)

TPayload = TypeVar("TPayload", bound=BaseModel)

DEFAULT_CHAT_NAME = "Guest"


@dataclass(slots=True, eq=False)
class ConnectionState:
    """What the server remembers about one connection besides its rooms."""

    connection: Connection
    chat_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.chat_name or DEFAULT_CHAT_NAME


class RealtimeHandlers:
    """Dispatches decoded frames to the per-event handlers.

    Events that reference an unknown trip are dropped. With
    ``realtime_errors`` enabled the sender additionally receives an
    ``error`` event; other room members never see anything.
    """

    def __init__(
        self,
        *,
        store: TripStore,
        broadcaster: RoomBroadcaster,
        vehicles: VehicleRegistry,
        chat: ChatLog,
        realtime_errors: bool = False,
    ) -> None:
        self._store = store
        self._broadcaster = broadcaster
        self._vehicles = vehicles
        self._chat = chat
        self._realtime_errors = realtime_errors
        self._handlers: dict[InboundEvent, Callable[[ConnectionState, Any], Awaitable[None]]] = {
            InboundEvent.JOIN_TRIP: self.join_trip,
            InboundEvent.LOCATION_UPDATE: self.location_update,
            InboundEvent.CHAT_JOIN: self.chat_join,
            InboundEvent.CHAT_LEAVE: self.chat_leave,
            InboundEvent.CHAT_MESSAGE: self.chat_message,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def handle_text(self, state: ConnectionState, text: str) -> None:
        """Decode one text frame and dispatch it. Malformed frames are dropped."""
        try:
            raw = json.loads(text)
        except json.JSONDecodeError:
            _logger.debug("Dropping non-JSON frame from %s", state.connection.connection_id)
            await self._reject(state, "", "invalid_frame", "frame is not JSON")
            return

        try:
            frame = EventFrame.model_validate(raw)
        except ValidationError:
            _logger.debug("Dropping malformed frame from %s: %s", state.connection.connection_id, redact_for_log(raw))
            await self._reject(state, "", "invalid_frame", "frame must be an object with an 'event' name")
            return

        await self.dispatch(state, frame)

    async def dispatch(self, state: ConnectionState, frame: EventFrame) -> None:
        event = resolve_inbound(frame.event)
        _logger.debug(
            "Event %s from %s: %s",
            frame.event,
            state.connection.connection_id,
            redact_for_log(frame.data),
        )
        if event is None:
            await self._reject(state, frame.event, "unknown_event", f"unknown event {frame.event!r}")
            return
        await self._handlers[event](state, frame.data)

    def disconnect(self, state: ConnectionState) -> None:
        """Forget every room membership of a closed connection."""
        self._broadcaster.disconnect(state.connection)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    async def join_trip(self, state: ConnectionState, data: Any) -> None:
        """Join the trip room and send the joiner the current vehicles and schedule."""
        payload = await self._parse(state, InboundEvent.JOIN_TRIP, JoinTripPayload, data)
        if payload is None:
            return
        trip = self._store.find_by_id(payload.trip_id)
        if trip is None:
            await self._trip_not_found(state, InboundEvent.JOIN_TRIP, payload.trip_id)
            return

        self._broadcaster.join(state.connection, trip_room(trip.id))
        vehicles = trip.vehicles_snapshot()
        schedule = trip.schedule_snapshot()
        await self._broadcaster.send(state.connection, OutboundEvent.VEHICLES, vehicles)
        await self._broadcaster.send(state.connection, OutboundEvent.SCHEDULE_UPDATE, schedule)

    async def location_update(self, state: ConnectionState, data: Any) -> None:
        report = await self._parse(state, InboundEvent.LOCATION_UPDATE, PositionReport, data)
        if report is None:
            return
        updated = await self._vehicles.report_position(report)
        if updated is None and self._store.find_by_id(report.trip_id) is None:
            await self._trip_not_found(state, InboundEvent.LOCATION_UPDATE, report.trip_id)
        elif updated is None:
            await self._reject(
                state,
                InboundEvent.LOCATION_UPDATE,
                "vehicle_not_found",
                f"no vehicle {report.vehicle_id!r} on trip {report.trip_id!r}",
            )

    async def chat_join(self, state: ConnectionState, data: Any) -> None:
        payload = await self._parse(state, InboundEvent.CHAT_JOIN, ChatJoinPayload, data)
        if payload is None:
            return
        trip = self._store.find_by_id(payload.trip_id)
        if trip is None:
            await self._trip_not_found(state, InboundEvent.CHAT_JOIN, payload.trip_id)
            return

        state.chat_name = payload.name
        self._broadcaster.join(state.connection, chat_room(trip.id))
        await self._broadcaster.send(state.connection, OutboundEvent.CHAT_JOINED, {})

    async def chat_leave(self, state: ConnectionState, data: Any) -> None:
        """Leave the chat room only; trip room membership is kept."""
        payload = await self._parse(state, InboundEvent.CHAT_LEAVE, ChatLeavePayload, data)
        if payload is None:
            return
        self._broadcaster.leave(state.connection, chat_room(payload.trip_id))
        await self._broadcaster.send(state.connection, OutboundEvent.CHAT_LEFT, {})

    async def chat_message(self, state: ConnectionState, data: Any) -> None:
        payload = await self._parse(state, InboundEvent.CHAT_MESSAGE, ChatMessagePayload, data)
        if payload is None:
            return
        trip = self._store.find_by_id(payload.trip_id)
        if trip is None:
            await self._trip_not_found(state, InboundEvent.CHAT_MESSAGE, payload.trip_id)
            return
        await self._chat.post(trip, state.display_name, payload.text)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _parse(
        self,
        state: ConnectionState,
        event: InboundEvent,
        model: type[TPayload],
        data: Any,
    ) -> TPayload | None:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            _logger.debug("Dropping invalid %s payload from %s: %s", event, state.connection.connection_id, exc)
            await self._reject(state, event, "invalid_payload", f"invalid {event} payload")
            return None

    async def _trip_not_found(self, state: ConnectionState, event: InboundEvent, trip_id: str) -> None:
        _logger.debug("Dropping %s for unknown trip %s", event, trip_id)
        await self._reject(state, event, "trip_not_found", f"no trip with id {trip_id!r}")

    async def _reject(self, state: ConnectionState, event: str, code: str, message: str) -> None:
        if not self._realtime_errors:
            return
        await self._broadcaster.send(
            state.connection,
            OutboundEvent.ERROR,
            {"event": str(event), "code": code, "message": message},
        )
