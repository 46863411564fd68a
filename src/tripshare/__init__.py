"""tripshare - Realtime trip-sharing server with room-scoped broadcasts."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tripshare")
except PackageNotFoundError:
    __version__ = "0+local"
from tripshare.config import TripShareConfig
from tripshare.exceptions import (
    InvalidPayloadError,
    JoinCodeExhaustedError,
    ScheduleValidationError,
    TripNotFoundError,
    TripShareConfigError,
    TripShareError,
)
from tripshare.models import (
    ChatMessage,
    MapCenter,
    PositionReport,
    ScheduleItem,
    Trip,
    Vehicle,
)
from tripshare.realtime.broadcaster import RoomBroadcaster
from tripshare.server import create_app, run
from tripshare.state.store import TripStore

__all__ = [
    "__version__",
    "ChatMessage",
    "InvalidPayloadError",
    "JoinCodeExhaustedError",
    "MapCenter",
    "PositionReport",
    "RoomBroadcaster",
    "ScheduleItem",
    "ScheduleValidationError",
    "Trip",
    "TripNotFoundError",
    "TripShareConfig",
    "TripShareConfigError",
    "TripShareError",
    "TripStore",
    "Vehicle",
    "create_app",
    "run",
]
