"""
Application services for shelter schedules and visit validation.

The service coordinates fetching raw slots via a slot source adapter and
delegates normalization, availability and conflict logic to the domain
layer. Keeping the source behind a protocol lets the CLI use the JSON
adapter while tests plug in a simple stub.
"""

from __future__ import annotations

import logging
from typing import List, Protocol

import pendulum
from pendulum import Date, DateTime

from ..domain.availability import DAYS_PER_WEEK, AvailabilityCalculator
from ..domain.conflict_checker import ConflictChecker
from ..domain.exceptions import ShelterHoursError
from ..domain.models import NormalizedSlots, ShelterHours, Slot, TimeRange, WeeklySchedule
from ..domain.schedule_assembler import ScheduleAssembler
from ..domain.slot_normalizer import SlotNormalizer

logger = logging.getLogger(__name__)


class SlotSourceProtocol(Protocol):
    """Protocol describing the slot source behaviour needed by the service."""

    async def get_slots(
        self,
        shelter_id: str,
        start: DateTime,
        end: DateTime,
        animal_id: str | None = None,
    ) -> List[Slot]:
        """
        Return activity and unavailability slots overlapping [start, end).

        Activity slots are restricted to ``animal_id`` when it is given;
        unavailability slots are restricted to ``shelter_id``.
        """


class SchedulingService:
    """
    Orchestrates slot retrieval, normalization and schedule building.
    """

    def __init__(
        self,
        slot_source: SlotSourceProtocol,
        slot_normalizer: SlotNormalizer | None = None,
        availability_calculator: AvailabilityCalculator | None = None,
        schedule_assembler: ScheduleAssembler | None = None,
        conflict_checker: ConflictChecker | None = None,
    ) -> None:
        self._slot_source = slot_source
        self._slot_normalizer = slot_normalizer or SlotNormalizer()
        self._availability_calculator = availability_calculator or AvailabilityCalculator()
        self._schedule_assembler = schedule_assembler or ScheduleAssembler()
        self._conflict_checker = conflict_checker or ConflictChecker()

    async def get_normalized_slots(
        self,
        *,
        hours: ShelterHours,
        shelter_id: str,
        start: DateTime,
        end: DateTime,
        animal_id: str | None = None,
    ) -> NormalizedSlots:
        """Fetch the slots overlapping [start, end) and normalize them to opening hours."""
        slots = await self._slot_source.get_slots(
            shelter_id=shelter_id,
            start=start,
            end=end,
            animal_id=animal_id,
        )
        logger.debug(
            "Fetched %d slot(s) for shelter %s between %s and %s",
            len(slots), shelter_id, start, end,
        )

        normalized = self._slot_normalizer.normalize(
            slots, hours.opening_time, hours.closing_time
        )
        logger.debug("Normalized into %d fragment(s)", len(normalized))

        return normalized

    async def get_weekly_schedule(
        self,
        *,
        hours: ShelterHours,
        shelter_id: str,
        week_start: Date,
        timezone: str,
        animal_id: str | None = None,
    ) -> WeeklySchedule:
        """
        Build the seven-day schedule starting at ``week_start``.

        Raises:
            ShelterHoursError: If the shelter opens at or after it closes
        """
        if not hours.is_valid():
            raise ShelterHoursError(
                f"Shelter '{shelter_id}' has invalid hours: opening time ({hours.opening_time}) "
                f"must be before closing time ({hours.closing_time})"
            )

        start = pendulum.datetime(week_start.year, week_start.month, week_start.day, tz=timezone)
        end = start.add(days=DAYS_PER_WEEK)

        normalized = await self.get_normalized_slots(
            hours=hours,
            shelter_id=shelter_id,
            start=start,
            end=end,
            animal_id=animal_id,
        )

        available = self._availability_calculator.calculate_weekly_available_ranges(
            normalized.slots,
            hours.opening_time,
            hours.closing_time,
            start.date(),
        )

        schedule = self._schedule_assembler.assemble_week(
            reserved=normalized.activity_slots(),
            unavailable=normalized.unavailability_slots(),
            available=available,
            start_date=start.date(),
            shelter_id=shelter_id,
            animal_id=animal_id,
        )

        logger.info(
            "Built weekly schedule for shelter %s from %s (%d free block(s))",
            shelter_id, start.to_date_string(), len(available),
        )

        return schedule

    async def validate_new_activity(
        self,
        *,
        hours: ShelterHours,
        shelter_id: str,
        animal_id: str,
        start: DateTime,
        end: DateTime,
    ) -> TimeRange:
        """
        Check that a proposed activity fits opening hours and hits no blocked time.

        Returns:
            The validated proposal as a TimeRange

        Raises:
            InvalidArgumentError: If end is not after start
            ShelterHoursError: If the shelter's opening window is empty
            OutsideShelterHoursError: If the proposal leaves opening hours
            SchedulingConflictError: If reserved or unavailable time overlaps
        """
        proposal = self._conflict_checker.validate_within_hours(start, end, hours)

        day_start = start.start_of("day")
        normalized = await self.get_normalized_slots(
            hours=hours,
            shelter_id=shelter_id,
            start=day_start,
            end=day_start.add(days=1),
            animal_id=animal_id,
        )

        self._conflict_checker.ensure_no_conflicts(start, end, normalized.slots)
        logger.info("Proposed activity %s for animal %s is free", proposal, animal_id)

        return proposal
