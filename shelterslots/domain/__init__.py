"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .availability import AvailabilityCalculator
from .conflict_checker import ConflictChecker
from .models import (
    ActivitySlot,
    DailySchedule,
    NormalizedSlots,
    ShelterHours,
    ShelterUnavailabilitySlot,
    Slot,
    SlotStatus,
    SlotType,
    TimeBlock,
    TimeRange,
    WeeklySchedule,
)
from .schedule_assembler import ScheduleAssembler
from .slot_normalizer import SlotNormalizer

__all__ = [
    "ActivitySlot",
    "AvailabilityCalculator",
    "ConflictChecker",
    "DailySchedule",
    "NormalizedSlots",
    "ScheduleAssembler",
    "ShelterHours",
    "ShelterUnavailabilitySlot",
    "Slot",
    "SlotNormalizer",
    "SlotStatus",
    "SlotType",
    "TimeBlock",
    "TimeRange",
    "WeeklySchedule",
]
