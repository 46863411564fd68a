"""REST routes: create and fetch trips, add vehicles and schedule items."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from aiohttp import web
from pydantic import BaseModel, ValidationError

from tripshare.context import CONTEXT_KEY
from tripshare.exceptions import (
    InvalidPayloadError,
    JoinCodeExhaustedError,
    TripNotFoundError,
)
from tripshare.models.requests import AddVehicleRequest, CreateTripRequest

_logger = logging.getLogger(__name__)

TRequest = TypeVar("TRequest", bound=BaseModel)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Translate domain errors into JSON error responses."""
    try:
        return await handler(request)
    except TripNotFoundError as exc:
        _logger.debug("%s %s: %s", request.method, request.path, exc)
        return _error(404, "not found")
    except InvalidPayloadError as exc:
        _logger.debug("%s %s: %s", request.method, request.path, exc)
        return _error(400, str(exc))
    except JoinCodeExhaustedError as exc:
        _logger.warning("%s %s: %s", request.method, request.path, exc)
        return _error(503, "no join code available, try again")


async def _read_json(request: web.Request) -> dict[str, Any]:
    """Return the JSON object body, or ``{}`` when the request has no body."""
    if not request.body_exists:
        return {}
    raw = await request.read()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidPayloadError("request body is not valid JSON") from exc
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidPayloadError("request body must be a JSON object")
    return body


def _validate(model: type[TRequest], body: dict[str, Any]) -> TRequest:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        fields = tuple(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise InvalidPayloadError(f"invalid fields: {', '.join(fields) or 'body'}", fields=fields) from exc


async def create_trip(request: web.Request) -> web.Response:
    ctx = request.app[CONTEXT_KEY]
    payload = _validate(CreateTripRequest, await _read_json(request))
    trip = ctx.store.create_trip(payload.name, payload.center)
    return web.json_response({"id": trip.id, "joinCode": trip.join_code, "join_code": trip.join_code})


async def get_trip(request: web.Request) -> web.Response:
    ctx = request.app[CONTEXT_KEY]
    trip = ctx.store.get_by_join_code(request.match_info["join_code"])
    return web.json_response(trip.snapshot())


async def add_vehicle(request: web.Request) -> web.Response:
    ctx = request.app[CONTEXT_KEY]
    trip_id = request.match_info["trip_id"]
    # Unknown trips are reported before the body is looked at.
    ctx.store.get_by_id(trip_id)
    payload = _validate(AddVehicleRequest, await _read_json(request))
    vehicle = ctx.vehicles.register_vehicle(trip_id, payload.name)
    return web.json_response({"vehicleId": vehicle.id, "vehicle_id": vehicle.id})


async def add_schedule_item(request: web.Request) -> web.Response:
    ctx = request.app[CONTEXT_KEY]
    trip_id = request.match_info["trip_id"]
    ctx.store.get_by_id(trip_id)
    item = await ctx.schedule.add_schedule_item(trip_id, await _read_json(request))
    return web.json_response({"ok": True, "item": item.model_dump(mode="json")})


def add_routes(app: web.Application, prefix: str = "") -> None:
    """Register the trip routes on *app* under *prefix*."""
    app.router.add_post(f"{prefix}/trips", create_trip)
    app.router.add_get(f"{prefix}/trips/{{join_code}}", get_trip)
    app.router.add_post(f"{prefix}/trips/{{trip_id}}/vehicles", add_vehicle)
    app.router.add_post(f"{prefix}/trips/{{trip_id}}/schedule", add_schedule_item)
