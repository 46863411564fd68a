"""Custom exception hierarchy for tripshare."""

from __future__ import annotations


class TripShareError(Exception):
    """Base exception for all tripshare errors."""


class TripShareConfigError(TripShareError):
    """Invalid or missing configuration."""


class TripNotFoundError(TripShareError):
    """No trip matches the given identifier or join code."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class InvalidPayloadError(TripShareError):
    """A request body could not be parsed or failed validation."""

    def __init__(self, message: str, *, fields: tuple[str, ...] = ()) -> None:
        self.fields = fields
        super().__init__(message)


class ScheduleValidationError(InvalidPayloadError):
    """A schedule item is missing required fields or carries malformed ones."""


class JoinCodeExhaustedError(TripShareError):
    """Could not generate an unused join code within the retry budget.

    Raised instead of overwriting an existing trip. Increase
    ``join_code_length`` if this shows up outside of tests.
    """
