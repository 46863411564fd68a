"""Trip model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from tripshare.models.chat import ChatMessage
from tripshare.models.schedule import ScheduleItem
from tripshare.models.vehicle import Vehicle


class MapCenter(BaseModel):
    """Initial map viewport for a trip.

    The defaults frame Thailand, matching new trips created without a
    ``center`` in the request.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    lat: float = Field(default=13.736, ge=-90, le=90)
    lng: float = Field(default=100.523, ge=-180, le=180)
    zoom: int = Field(default=6, ge=0, le=22)


class Trip(BaseModel):
    """A shareable itinerary with its map, schedule, vehicles and chat.

    Unlike the value models around it this one is mutable: the store hands
    out the live instance and the managers append to its sub-collections.
    ``vehicles`` is keyed by vehicle id so lookups are direct, but it is
    serialized as a list in insertion order.
    """

    model_config = ConfigDict(extra="forbid")

    id: str
    join_code: str
    name: str
    center: MapCenter = Field(default_factory=MapCenter)
    schedule: list[ScheduleItem] = Field(default_factory=list)
    vehicles: dict[str, Vehicle] = Field(default_factory=dict)
    chat: list[ChatMessage] = Field(default_factory=list)

    @field_serializer("vehicles")
    def _serialize_vehicles(self, vehicles: dict[str, Vehicle]) -> list[Vehicle]:
        return list(vehicles.values())

    def snapshot(self) -> dict[str, Any]:
        """Full JSON-ready view of the trip."""
        return self.model_dump(mode="json")

    def schedule_snapshot(self) -> list[dict[str, Any]]:
        return [item.model_dump(mode="json") for item in self.schedule]

    def vehicles_snapshot(self) -> list[dict[str, Any]]:
        return [vehicle.model_dump(mode="json") for vehicle in self.vehicles.values()]
