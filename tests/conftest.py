from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from tripshare.realtime.broadcaster import RoomBroadcaster
from tripshare.state.chat import ChatLog
from tripshare.state.schedule import ScheduleManager
from tripshare.state.store import TripStore
from tripshare.state.vehicles import VehicleRegistry


@dataclass(eq=False)
class FakeConnection:
    """Records every frame sent to it, in order."""

    connection_id: str = "conn"
    frames: list[tuple[str, Any]] = field(default_factory=list)

    async def send_event(self, event: str, data: Any) -> None:
        self.frames.append((str(event), data))

    def events(self) -> list[str]:
        return [event for event, _ in self.frames]

    def last(self, event: str) -> Any:
        for name, data in reversed(self.frames):
            if name == event:
                return data
        raise AssertionError(f"no {event!r} frame in {self.events()}")


@pytest.fixture
def make_connection() -> Callable[..., FakeConnection]:
    counter = iter(range(1, 1_000_000))

    def _make(connection_id: str | None = None) -> FakeConnection:
        return FakeConnection(connection_id or f"conn-{next(counter)}")

    return _make


@pytest.fixture
def store() -> TripStore:
    return TripStore()


@pytest.fixture
def broadcaster() -> RoomBroadcaster:
    return RoomBroadcaster()


@pytest.fixture
def schedule(store: TripStore, broadcaster: RoomBroadcaster) -> ScheduleManager:
    return ScheduleManager(store, broadcaster)


@pytest.fixture
def vehicles(store: TripStore, broadcaster: RoomBroadcaster) -> VehicleRegistry:
    return VehicleRegistry(store, broadcaster)


@pytest.fixture
def chat(broadcaster: RoomBroadcaster) -> ChatLog:
    return ChatLog(broadcaster)
