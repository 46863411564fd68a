from __future__ import annotations

import json

import pytest

from tripshare._constants import chat_room, trip_room
from tripshare.realtime.events import EventFrame, InboundEvent, resolve_inbound
from tripshare.realtime.handlers import ConnectionState, RealtimeHandlers


def _handlers(store, broadcaster, vehicles, chat, *, realtime_errors: bool = False) -> RealtimeHandlers:
    return RealtimeHandlers(
        store=store,
        broadcaster=broadcaster,
        vehicles=vehicles,
        chat=chat,
        realtime_errors=realtime_errors,
    )


async def _send(handlers: RealtimeHandlers, state: ConnectionState, event: str, data: object) -> None:
    await handlers.handle_text(state, json.dumps({"event": event, "data": data}))


def test_original_event_names_resolve_to_current_ones() -> None:
    assert resolve_inbound("locUpdate") is InboundEvent.LOCATION_UPDATE
    assert resolve_inbound("chat:join") is InboundEvent.CHAT_JOIN
    assert resolve_inbound("chat:leave") is InboundEvent.CHAT_LEAVE
    assert resolve_inbound("chat:msg") is InboundEvent.CHAT_MESSAGE
    assert resolve_inbound("joinTrip") is InboundEvent.JOIN_TRIP
    assert resolve_inbound("bogus") is None


@pytest.mark.asyncio
async def test_join_sends_snapshot_even_for_empty_trip(store, broadcaster, vehicles, chat, make_connection) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat)
    trip = store.create_trip("X")
    conn = make_connection()
    state = ConnectionState(conn)

    await _send(handlers, state, "joinTrip", {"tripId": trip.id, "vehicleId": None})

    assert conn.frames == [("vehicles", []), ("scheduleUpdate", [])]
    assert broadcaster.rooms_of(conn) == {trip_room(trip.id)}


@pytest.mark.asyncio
async def test_join_snapshot_goes_to_joiner_only(store, broadcaster, vehicles, chat, schedule, make_connection) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat)
    trip = store.create_trip("X")
    vehicles.register_vehicle(trip.id, "Van")
    await schedule.add_schedule_item(trip.id, {"title": "A", "time_start": "2025-11-01T09:30:00Z"})
    first = ConnectionState(make_connection())
    second = ConnectionState(make_connection())
    await _send(handlers, first, "joinTrip", {"tripId": trip.id})
    first.connection.frames.clear()

    await _send(handlers, second, "joinTrip", {"tripId": trip.id})

    assert first.connection.frames == []
    assert [v["name"] for v in second.connection.last("vehicles")] == ["Van"]
    assert [i["title"] for i in second.connection.last("scheduleUpdate")] == ["A"]


@pytest.mark.asyncio
async def test_unknown_trip_is_silently_dropped(store, broadcaster, vehicles, chat, make_connection) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat)
    conn = make_connection()
    state = ConnectionState(conn)

    await _send(handlers, state, "joinTrip", {"tripId": "missing"})
    await _send(handlers, state, "chatJoin", {"tripId": "missing", "name": "Ann"})
    await _send(handlers, state, "chatMessage", {"tripId": "missing", "text": "hi"})
    await _send(handlers, state, "locationUpdate", {"tripId": "missing", "vehicleId": "v", "lat": 1, "lng": 2})

    assert conn.frames == []
    assert broadcaster.rooms_of(conn) == frozenset()
    assert state.chat_name is None


@pytest.mark.asyncio
async def test_unknown_trip_reports_error_when_enabled(store, broadcaster, vehicles, chat, make_connection) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat, realtime_errors=True)
    conn = make_connection()

    await _send(handlers, ConnectionState(conn), "joinTrip", {"tripId": "missing"})

    assert conn.frames == [
        ("error", {"event": "joinTrip", "code": "trip_not_found", "message": "no trip with id 'missing'"})
    ]


@pytest.mark.asyncio
async def test_malformed_frames_are_ignored(store, broadcaster, vehicles, chat, make_connection) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat)
    conn = make_connection()
    state = ConnectionState(conn)

    await handlers.handle_text(state, "not json")
    await handlers.handle_text(state, json.dumps(["joinTrip"]))
    await _send(handlers, state, "teleport", {"tripId": "x"})
    await _send(handlers, state, "joinTrip", {"vehicleId": "v"})

    assert conn.frames == []


@pytest.mark.asyncio
async def test_malformed_frames_report_errors_when_enabled(store, broadcaster, vehicles, chat, make_connection) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat, realtime_errors=True)
    conn = make_connection()
    state = ConnectionState(conn)

    await handlers.handle_text(state, "not json")
    await _send(handlers, state, "teleport", {})
    await _send(handlers, state, "chatMessage", {"text": "no trip id"})

    assert [data["code"] for _, data in conn.frames] == ["invalid_frame", "unknown_event", "invalid_payload"]


@pytest.mark.asyncio
async def test_location_update_broadcasts_to_trip_room(store, broadcaster, vehicles, chat, make_connection) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat)
    trip = store.create_trip("X")
    van = vehicles.register_vehicle(trip.id, "Van")
    viewer = ConnectionState(make_connection())
    driver = ConnectionState(make_connection())
    await _send(handlers, viewer, "joinTrip", {"tripId": trip.id})
    viewer.connection.frames.clear()

    await _send(
        handlers,
        driver,
        "locUpdate",
        {"tripId": trip.id, "vehicleId": van.id, "lat": 14.7, "lng": 101.4, "speedKmh": 40, "heading": 90},
    )

    listing = viewer.connection.last("vehicles")
    assert listing[0]["last_lat"] == 14.7
    assert listing[0]["last_speed_kmh"] == 40
    assert driver.connection.frames == []


@pytest.mark.asyncio
async def test_chat_flow_uses_joined_name_and_default_guest(store, broadcaster, vehicles, chat, make_connection) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat)
    trip = store.create_trip("X")
    ann = ConnectionState(make_connection())
    anonymous = ConnectionState(make_connection())

    await _send(handlers, ann, "chatJoin", {"tripId": trip.id, "name": "Ann"})
    assert ann.connection.frames == [("chatJoined", {})]

    await _send(handlers, ann, "chatMessage", {"tripId": trip.id, "text": "hello"})
    await _send(handlers, anonymous, "chat:msg", {"tripId": trip.id, "text": "hi from outside"})

    received = [data for event, data in ann.connection.frames if event == "chatMessage"]
    assert [(m["name"], m["text"]) for m in received] == [("Ann", "hello"), ("Guest", "hi from outside")]
    assert anonymous.connection.frames == []
    assert [m.name for m in trip.chat] == ["Ann", "Guest"]


@pytest.mark.asyncio
async def test_chat_join_without_name_defaults_to_guest(store, broadcaster, vehicles, chat, make_connection) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat)
    trip = store.create_trip("X")
    state = ConnectionState(make_connection())

    await _send(handlers, state, "chatJoin", {"tripId": trip.id, "name": ""})

    assert state.display_name == "Guest"


@pytest.mark.asyncio
async def test_chat_leave_keeps_trip_room(store, broadcaster, vehicles, chat, make_connection) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat)
    trip = store.create_trip("X")
    conn = make_connection()
    state = ConnectionState(conn)
    await _send(handlers, state, "joinTrip", {"tripId": trip.id})
    await _send(handlers, state, "chatJoin", {"tripId": trip.id, "name": "Ann"})

    await _send(handlers, state, "chatLeave", {"tripId": trip.id})

    assert conn.events()[-1] == "chatLeft"
    assert broadcaster.rooms_of(conn) == {trip_room(trip.id)}
    assert chat_room(trip.id) not in broadcaster.rooms_of(conn)


@pytest.mark.asyncio
async def test_disconnect_drops_all_rooms_and_rejoin_gets_fresh_snapshot(
    store, broadcaster, vehicles, chat, make_connection
) -> None:
    handlers = _handlers(store, broadcaster, vehicles, chat)
    trip = store.create_trip("X")
    state = ConnectionState(make_connection())
    await _send(handlers, state, "joinTrip", {"tripId": trip.id})
    await _send(handlers, state, "chatJoin", {"tripId": trip.id, "name": "Ann"})

    handlers.disconnect(state)
    assert broadcaster.rooms_of(state.connection) == frozenset()

    vehicles.register_vehicle(trip.id, "Late van")
    rejoined = ConnectionState(make_connection())
    await handlers.dispatch(rejoined, EventFrame(event="joinTrip", data={"tripId": trip.id}))

    assert [v["name"] for v in rejoined.connection.last("vehicles")] == ["Late van"]
