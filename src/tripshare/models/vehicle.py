"""Vehicle model."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field


class Vehicle(BaseModel):
    """A vehicle taking part in a trip.

    The ``last_*`` fields and ``updated_at`` stay ``None`` until the first
    position report arrives. Reports replace the instance wholesale via
    :meth:`pydantic.BaseModel.model_copy`.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Vehicle"
    last_lat: float | None = None
    """Latitude in degrees."""
    last_lng: float | None = None
    """Longitude in degrees."""
    last_speed_kmh: float | None = None
    """Speed in km/h."""
    last_heading: float | None = None
    """Heading in degrees."""
    updated_at: int | None = None
    """Epoch milliseconds of the last report."""
