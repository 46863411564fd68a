"""Vehicle registration and position reports."""

from __future__ import annotations

import logging

from tripshare._constants import trip_room
from tripshare.ingestion.normalize import now_ms
from tripshare.models.requests import PositionReport
from tripshare.models.vehicle import Vehicle
from tripshare.realtime.broadcaster import RoomBroadcaster
from tripshare.realtime.events import OutboundEvent
from tripshare.state.store import TripStore

_logger = logging.getLogger(__name__)


class VehicleRegistry:
    def __init__(self, store: TripStore, broadcaster: RoomBroadcaster) -> None:
        self._store = store
        self._broadcaster = broadcaster

    def register_vehicle(self, trip_id: str, name: str = "Vehicle") -> Vehicle:
        """Add a vehicle with no position yet to the trip.

        Nothing is broadcast; the vehicle shows up in the next vehicle list
        sent to the room.

        Raises
        ------
        TripNotFoundError
            If *trip_id* is unknown.
        """
        trip = self._store.get_by_id(trip_id)
        vehicle = Vehicle(name=name)
        trip.vehicles[vehicle.id] = vehicle
        _logger.info("Registered vehicle %s (%s) on trip %s", vehicle.id, vehicle.name, trip.id)
        return vehicle

    async def report_position(self, report: PositionReport) -> Vehicle | None:
        """Record a position report and broadcast the trip's vehicle list.

        Reports for an unknown trip or vehicle are ignored and return
        ``None``. Accepted reports overwrite every last-known field,
        regardless of ``ts``: a late report can replace a newer one.
        """
        trip = self._store.find_by_id(report.trip_id)
        if trip is None:
            _logger.debug("Ignoring position for unknown trip %s", report.trip_id)
            return None
        current = trip.vehicles.get(report.vehicle_id)
        if current is None:
            _logger.debug("Ignoring position for unknown vehicle %s on trip %s", report.vehicle_id, trip.id)
            return None

        updated = current.model_copy(
            update={
                "last_lat": report.lat,
                "last_lng": report.lng,
                "last_speed_kmh": report.speed_kmh,
                "last_heading": report.heading,
                "updated_at": report.ts if report.ts is not None else now_ms(),
            }
        )
        trip.vehicles[updated.id] = updated
        snapshot = trip.vehicles_snapshot()

        await self._broadcaster.broadcast(trip_room(trip.id), OutboundEvent.VEHICLES, snapshot)
        return updated
