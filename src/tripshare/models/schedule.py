"""Schedule item model."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tripshare.ingestion.normalize import safe_str


class ScheduleItem(BaseModel):
    """One stop or activity on a trip's itinerary.

    Parameters
    ----------
    id : str
        Server-assigned identifier.
    title : str
        What happens at this point of the trip.
    time_start : datetime
        When it starts. Naive values are taken as UTC.
    time_end : datetime or None
        When it ends, if known.
    lat, lng : float or None
        Optional coordinates for the map marker.
    notes : str
        Free-text notes.
    gmaps_url : str
        Optional external map link; empty when not given.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    time_start: datetime = Field(validation_alias=AliasChoices("time_start", "timeStart", "startTime", "start_time"))
    time_end: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("time_end", "timeEnd", "endTime", "end_time"),
    )
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    notes: str = ""
    gmaps_url: str = Field(default="", validation_alias=AliasChoices("gmaps_url", "gmapsUrl", "mapUrl", "map_url"))

    @field_validator("title", mode="before")
    @classmethod
    def _title_to_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return safe_str(value)
        return value

    @field_validator("title")
    @classmethod
    def _title_non_empty(cls, value: str) -> str:
        title = value.strip()
        if not title:
            raise ValueError("title must be non-empty")
        return title

    @field_validator("time_end", "lat", "lng", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("notes", "gmaps_url", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("time_start", "time_end")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
