"""Schedule additions and their broadcast."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from tripshare._constants import trip_room
from tripshare.exceptions import ScheduleValidationError
from tripshare.ingestion.normalize import is_blank
from tripshare.models.schedule import ScheduleItem
from tripshare.realtime.broadcaster import RoomBroadcaster
from tripshare.realtime.events import OutboundEvent
from tripshare.state.store import TripStore

_logger = logging.getLogger(__name__)

_TITLE_KEYS = ("title",)
_START_KEYS = ("time_start", "timeStart", "startTime", "start_time")


def _first_present(payload: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _describe_errors(exc: ValidationError) -> tuple[str, tuple[str, ...]]:
    fields = tuple(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
    detail = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())
    return detail, fields


class ScheduleManager:
    """Appends schedule items to trips and pushes the new schedule to the room."""

    def __init__(self, store: TripStore, broadcaster: RoomBroadcaster) -> None:
        self._store = store
        self._broadcaster = broadcaster

    def build_item(self, payload: Mapping[str, Any]) -> ScheduleItem:
        """Validate a client payload into a new :class:`ScheduleItem`.

        Any client-supplied ``id`` is ignored; items always get a fresh one.

        Raises
        ------
        ScheduleValidationError
            If title or start time is missing, or a field is malformed.
        """
        missing = []
        if is_blank(_first_present(payload, _TITLE_KEYS)):
            missing.append("title")
        if is_blank(_first_present(payload, _START_KEYS)):
            missing.append("time_start")
        if missing:
            raise ScheduleValidationError("title/time_start required", fields=tuple(missing))

        data = {key: value for key, value in payload.items() if key != "id"}
        try:
            return ScheduleItem.model_validate(data)
        except ValidationError as exc:
            detail, fields = _describe_errors(exc)
            raise ScheduleValidationError(f"invalid schedule item: {detail}", fields=fields) from exc

    async def add_schedule_item(self, trip_id: str, payload: Mapping[str, Any]) -> ScheduleItem:
        """Append an item to the trip's schedule and broadcast the full schedule.

        The trip is resolved before the payload is validated, so an unknown
        trip reports not-found even for an invalid payload. Items keep
        insertion order; nothing is sorted by start time.

        Raises
        ------
        TripNotFoundError
            If *trip_id* is unknown.
        ScheduleValidationError
            If the payload is rejected. The schedule is left untouched.
        """
        trip = self._store.get_by_id(trip_id)
        item = self.build_item(payload)

        trip.schedule.append(item)
        snapshot = trip.schedule_snapshot()
        _logger.debug("Trip %s schedule now has %d items", trip.id, len(snapshot))

        await self._broadcaster.broadcast(trip_room(trip.id), OutboundEvent.SCHEDULE_UPDATE, snapshot)
        return item
