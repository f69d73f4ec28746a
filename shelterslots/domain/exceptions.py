"""
Domain-specific exception hierarchy for the shelter scheduling application.
"""


class ShelterSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidArgumentError(ShelterSlotsError, ValueError):
    """Raised when a caller passes a missing or malformed argument."""


class SlotOverflowError(ShelterSlotsError, OverflowError):
    """Raised when splitting a slot leaves the representable date range."""


class ShelterHoursError(ShelterSlotsError):
    """Raised when a shelter's opening hours cannot be scheduled against."""


class OutsideShelterHoursError(ShelterSlotsError):
    """Raised when a proposed activity falls outside opening hours."""


class SchedulingConflictError(ShelterSlotsError):
    """Raised when a proposed activity overlaps reserved or unavailable time."""

    def __init__(self, message: str, conflicts=()):
        super().__init__(message)
        self.conflicts = tuple(conflicts)


class SlotSourceError(ShelterSlotsError):
    """Raised when slot data cannot be loaded or parsed."""
