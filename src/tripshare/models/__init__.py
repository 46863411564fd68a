"""Data models for trips and realtime payloads."""

from tripshare.models.chat import ChatMessage
from tripshare.models.requests import (
    AddVehicleRequest,
    ChatJoinPayload,
    ChatLeavePayload,
    ChatMessagePayload,
    CreateTripRequest,
    JoinTripPayload,
    PositionReport,
    TripEventPayload,
)
from tripshare.models.schedule import ScheduleItem
from tripshare.models.trip import MapCenter, Trip
from tripshare.models.vehicle import Vehicle

__all__ = [
    "AddVehicleRequest",
    "ChatJoinPayload",
    "ChatLeavePayload",
    "ChatMessage",
    "ChatMessagePayload",
    "CreateTripRequest",
    "JoinTripPayload",
    "MapCenter",
    "PositionReport",
    "ScheduleItem",
    "Trip",
    "TripEventPayload",
    "Vehicle",
]
