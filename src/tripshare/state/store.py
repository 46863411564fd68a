"""In-memory trip store.

The store is the single owner of trip records for the lifetime of the
process. It keeps two indexes over the same :class:`Trip` instances: by
join code (what viewers type in) and by trip id (what every mutation
path uses).
"""

from __future__ import annotations

import logging
import secrets
import uuid
from collections.abc import Callable

from tripshare._constants import (
    DEMO_CENTER,
    DEMO_JOIN_CODE,
    DEMO_SCHEDULE,
    DEMO_TRIP_NAME,
    JOIN_CODE_ALPHABET,
)
from tripshare.exceptions import JoinCodeExhaustedError, TripNotFoundError
from tripshare.models.schedule import ScheduleItem
from tripshare.models.trip import MapCenter, Trip

_logger = logging.getLogger(__name__)


def generate_join_code(length: int = 6) -> str:
    """Return a random lowercase base36 join code."""
    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(length))


class TripStore:
    """Owns every trip, indexed by join code and by id.

    Not thread-safe. All callers run on one asyncio loop and never await
    between reading and mutating a trip.
    """

    def __init__(
        self,
        *,
        join_code_length: int = 6,
        join_code_attempts: int = 32,
        code_factory: Callable[[int], str] = generate_join_code,
    ) -> None:
        self._join_code_length = join_code_length
        self._join_code_attempts = join_code_attempts
        self._code_factory = code_factory
        self._by_code: dict[str, Trip] = {}
        self._by_id: dict[str, Trip] = {}

    def __len__(self) -> int:
        return len(self._by_code)

    def __contains__(self, join_code: object) -> bool:
        return join_code in self._by_code

    def _new_join_code(self) -> str:
        for _ in range(self._join_code_attempts):
            code = self._code_factory(self._join_code_length)
            if code not in self._by_code:
                return code
            _logger.debug("Join code collision on %s, retrying", code)
        raise JoinCodeExhaustedError(
            f"No free join code after {self._join_code_attempts} attempts "
            f"(length={self._join_code_length}, trips={len(self)})"
        )

    def _insert(self, trip: Trip) -> Trip:
        if trip.join_code in self._by_code:
            raise JoinCodeExhaustedError(f"Join code {trip.join_code!r} is already taken")
        self._by_code[trip.join_code] = trip
        self._by_id[trip.id] = trip
        return trip

    def create_trip(self, name: str = "My Trip", center: MapCenter | None = None) -> Trip:
        """Create and register a new trip with a fresh join code.

        Raises
        ------
        JoinCodeExhaustedError
            If every generated code collided with an existing trip.
        """
        trip = Trip(
            id=str(uuid.uuid4()),
            join_code=self._new_join_code(),
            name=name,
            center=center if center is not None else MapCenter(),
        )
        self._insert(trip)
        _logger.info("Created trip %s (%s) with join code %s", trip.id, trip.name, trip.join_code)
        return trip

    def get_by_join_code(self, join_code: str) -> Trip:
        trip = self._by_code.get(join_code)
        if trip is None:
            raise TripNotFoundError(f"No trip with join code {join_code!r}", key=join_code)
        return trip

    def get_by_id(self, trip_id: str) -> Trip:
        trip = self._by_id.get(trip_id)
        if trip is None:
            raise TripNotFoundError(f"No trip with id {trip_id!r}", key=trip_id)
        return trip

    def find_by_id(self, trip_id: str) -> Trip | None:
        """Like :meth:`get_by_id` but returns ``None`` for unknown ids."""
        return self._by_id.get(trip_id)

    def seed_demo(self) -> Trip:
        """Insert the sample Khao Yai day trip under ``demo1234``.

        Calling it again returns the already seeded trip.
        """
        existing = self._by_code.get(DEMO_JOIN_CODE)
        if existing is not None:
            return existing

        trip = Trip(
            id=str(uuid.uuid4()),
            join_code=DEMO_JOIN_CODE,
            name=DEMO_TRIP_NAME,
            center=MapCenter.model_validate(DEMO_CENTER),
            schedule=[ScheduleItem.model_validate(item) for item in DEMO_SCHEDULE],
        )
        self._insert(trip)
        _logger.info("Seeded demo trip %s with join code %s", trip.id, trip.join_code)
        return trip
