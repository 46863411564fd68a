"""Process-wide wiring of the store, managers and broadcaster."""

from __future__ import annotations

import dataclasses
import weakref

from aiohttp import web

from tripshare.config import TripShareConfig
from tripshare.realtime.broadcaster import RoomBroadcaster
from tripshare.realtime.handlers import RealtimeHandlers
from tripshare.state.chat import ChatLog
from tripshare.state.schedule import ScheduleManager
from tripshare.state.store import TripStore
from tripshare.state.vehicles import VehicleRegistry


@dataclasses.dataclass
class TripShareContext:
    """Everything a request or realtime handler needs.

    Built once per application by :meth:`build` and reachable from
    handlers through ``request.app[CONTEXT_KEY]``.
    """

    config: TripShareConfig
    store: TripStore
    broadcaster: RoomBroadcaster
    schedule: ScheduleManager
    vehicles: VehicleRegistry
    chat: ChatLog
    realtime: RealtimeHandlers
    sockets: weakref.WeakSet[web.WebSocketResponse] = dataclasses.field(default_factory=weakref.WeakSet)

    @classmethod
    def build(cls, config: TripShareConfig, *, store: TripStore | None = None) -> TripShareContext:
        if store is None:
            store = TripStore(
                join_code_length=config.join_code_length,
                join_code_attempts=config.join_code_attempts,
            )
        broadcaster = RoomBroadcaster()
        vehicles = VehicleRegistry(store, broadcaster)
        chat = ChatLog(
            broadcaster,
            history_limit=config.chat_history_limit,
            text_limit=config.chat_text_limit,
        )
        return cls(
            config=config,
            store=store,
            broadcaster=broadcaster,
            schedule=ScheduleManager(store, broadcaster),
            vehicles=vehicles,
            chat=chat,
            realtime=RealtimeHandlers(
                store=store,
                broadcaster=broadcaster,
                vehicles=vehicles,
                chat=chat,
                realtime_errors=config.realtime_errors,
            ),
        )


CONTEXT_KEY = web.AppKey("tripshare_context", TripShareContext)
