"""Pydantic request models for REST bodies and realtime event payloads.

These models provide a consistent "validate → normalize → execute" flow.
Inbound keys are accepted in snake_case or camelCase.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tripshare.ingestion.normalize import safe_float, safe_int, safe_str
from tripshare.models.trip import MapCenter

_REQUEST_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    populate_by_name=True,
    str_strip_whitespace=True,
)


def _name_or_default(value: Any, default: str) -> str:
    name = safe_str(value)
    if name is None or not name.strip():
        return default
    return name.strip()


class CreateTripRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    name: str = "My Trip"
    center: MapCenter = Field(default_factory=MapCenter)

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> str:
        return _name_or_default(value, "My Trip")

    @field_validator("center", mode="before")
    @classmethod
    def _default_center(cls, value: Any) -> Any:
        return MapCenter() if value is None else value


class AddVehicleRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    name: str = "Vehicle"

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> str:
        return _name_or_default(value, "Vehicle")


class TripEventPayload(BaseModel):
    """Base for realtime payloads addressed to one trip."""

    model_config = _REQUEST_CONFIG

    trip_id: str = Field(validation_alias=AliasChoices("trip_id", "tripId"))

    @field_validator("trip_id", mode="before")
    @classmethod
    def _trip_id_non_empty(cls, value: Any) -> str:
        trip_id = safe_str(value)
        if trip_id is None or not trip_id.strip():
            raise ValueError("tripId must be non-empty")
        return trip_id.strip()


class JoinTripPayload(TripEventPayload):
    vehicle_id: str | None = Field(default=None, validation_alias=AliasChoices("vehicle_id", "vehicleId"))


class PositionReport(TripEventPayload):
    """A GPS fix for one vehicle.

    Numeric fields are ``None`` when absent or unparseable; the report
    still overwrites the vehicle's last-known values with them.
    """

    vehicle_id: str = Field(validation_alias=AliasChoices("vehicle_id", "vehicleId"))
    lat: float | None = Field(default=None, validation_alias=AliasChoices("lat", "latitude"))
    lng: float | None = Field(default=None, validation_alias=AliasChoices("lng", "lon", "longitude"))
    speed_kmh: float | None = Field(default=None, validation_alias=AliasChoices("speedKmh", "speed_kmh", "speed"))
    heading: float | None = Field(default=None, validation_alias=AliasChoices("heading", "direction"))
    ts: int | None = Field(default=None, validation_alias=AliasChoices("ts", "timestamp"))

    @field_validator("vehicle_id", mode="before")
    @classmethod
    def _coerce_vehicle_id(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("lat", "lng", "speed_kmh", "heading", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("ts", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> int | None:
        parsed = safe_int(value)
        # 0 / negative timestamps fall back to "now" like a missing one.
        if parsed is None or parsed <= 0:
            return None
        return parsed


class ChatJoinPayload(TripEventPayload):
    name: str = "Guest"

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> str:
        return _name_or_default(value, "Guest")


class ChatLeavePayload(TripEventPayload):
    pass


class ChatMessagePayload(TripEventPayload):
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return safe_str(value) or ""
