"""
Conflict detection for proposed activities against normalized slots.
"""

from typing import Iterable, List

from pendulum import DateTime

from .exceptions import (
    InvalidArgumentError,
    OutsideShelterHoursError,
    SchedulingConflictError,
    ShelterHoursError,
)
from .models import ShelterHours, ShelterUnavailabilitySlot, Slot, SlotStatus, TimeRange

BLOCKING_STATUSES = frozenset({SlotStatus.RESERVED, SlotStatus.UNAVAILABLE})


class ConflictChecker:
    """
    Decides whether a proposed activity can be scheduled.

    Overlap uses half-open intervals: (new_start < existing_end) and
    (new_end > existing_start), so back-to-back activities do not conflict.
    """

    def validate_within_hours(
        self,
        start: DateTime,
        end: DateTime,
        hours: ShelterHours
    ) -> TimeRange:
        """
        Ensure a proposed activity lies within a single day's opening hours.

        Returns:
            The proposal as a TimeRange

        Raises:
            InvalidArgumentError: If end is not after start
            ShelterHoursError: If the shelter's opening window is empty
            OutsideShelterHoursError: If the proposal leaves the opening window
        """
        if end <= start:
            raise InvalidArgumentError(f"Start time {start} must be before end time {end}")

        if not hours.is_valid():
            raise ShelterHoursError(
                f"Invalid shelter hours: opening time ({hours.opening_time}) "
                f"must be before closing time ({hours.closing_time})"
            )

        if start.date() != end.date():
            raise OutsideShelterHoursError("Visit must start and end on the same day")

        if start.time() < hours.opening_time:
            raise OutsideShelterHoursError(
                f"Visit cannot start before shelter opening time ({hours.opening_time})"
            )

        if end.time() > hours.closing_time:
            raise OutsideShelterHoursError(
                f"Visit cannot end after shelter closing time ({hours.closing_time})"
            )

        return TimeRange(start=start, end=end)

    def find_conflicts(
        self,
        start: DateTime,
        end: DateTime,
        slots: Iterable[Slot]
    ) -> List[Slot]:
        """Return the reserved or unavailable slots intersecting [start, end)."""
        return [
            slot for slot in slots
            if slot.status in BLOCKING_STATUSES and slot.overlaps(start, end)
        ]

    def ensure_no_conflicts(
        self,
        start: DateTime,
        end: DateTime,
        slots: Iterable[Slot]
    ) -> None:
        """Raise SchedulingConflictError if any blocking slot intersects [start, end)."""
        conflicts = self.find_conflicts(start, end, slots)

        if not conflicts:
            return

        if any(isinstance(slot, ShelterUnavailabilitySlot) for slot in conflicts):
            message = "Shelter is unavailable during the requested time"
        else:
            message = "Animal already has an activity scheduled during the requested time"

        raise SchedulingConflictError(message, conflicts=conflicts)
