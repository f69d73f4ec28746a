"""
Domain models for shelter slots, opening hours and weekly schedules.
"""

from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import ClassVar, Iterator, List, Tuple

from pendulum import Date, DateTime


class SlotStatus(str, Enum):
    """Availability state of a slot."""
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    RESERVED = "reserved"


class SlotType(str, Enum):
    """Discriminator for the concrete slot variant."""
    ACTIVITY = "activity"
    SHELTER_UNAVAILABLE = "shelter_unavailable"


@dataclass(frozen=True, kw_only=True)
class Slot:
    """
    An immutable time interval with a status.

    Concrete variants carry their own payload fields; use ``ActivitySlot``
    or ``ShelterUnavailabilitySlot`` rather than this base class.
    No ordering invariant is enforced here: intervals with ``end <= start``
    are representable and simply drop out of normalization.
    """
    id: str
    start: DateTime
    end: DateTime
    status: SlotStatus
    created_at: DateTime | None = None
    updated_at: DateTime | None = None

    slot_type: ClassVar[SlotType]

    def duration_minutes(self) -> int:
        """Return the duration in minutes (negative for inverted intervals)."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, start: DateTime, end: DateTime) -> bool:
        """Check if this slot intersects the half-open interval [start, end)."""
        return self.start < end and self.end > start

    @property
    def label(self) -> str:
        return self.slot_type.value


@dataclass(frozen=True, kw_only=True)
class ActivitySlot(Slot):
    """Slot backed by a scheduled activity such as a fostering visit."""
    activity_id: str
    animal_id: str | None = None
    shelter_id: str | None = None

    slot_type: ClassVar[SlotType] = SlotType.ACTIVITY

    @property
    def label(self) -> str:
        return f"Activity {self.activity_id}"


@dataclass(frozen=True, kw_only=True)
class ShelterUnavailabilitySlot(Slot):
    """Slot marking a period in which the shelter cannot receive visits."""
    shelter_id: str
    reason: str | None = None

    slot_type: ClassVar[SlotType] = SlotType.SHELTER_UNAVAILABLE

    @property
    def label(self) -> str:
        return self.reason or "Shelter unavailable"


@dataclass(frozen=True)
class NormalizedSlots:
    """Chronologically ordered, single-day, hours-clipped slot fragments."""
    slots: Tuple[Slot, ...] = ()

    def __iter__(self) -> Iterator[Slot]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def activity_slots(self) -> List[ActivitySlot]:
        return [s for s in self.slots if isinstance(s, ActivitySlot)]

    def unavailability_slots(self) -> List[ShelterUnavailabilitySlot]:
        return [s for s in self.slots if isinstance(s, ShelterUnavailabilitySlot)]


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def contains(self, other: "TimeRange") -> bool:
        """Check if another range lies entirely within this one."""
        return self.start <= other.start and other.end <= self.end

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class ShelterHours:
    """
    Daily opening window of a shelter.

    Opening after (or equal to) closing is representable; such a window is
    simply never open.
    """
    opening_time: time
    closing_time: time

    def is_valid(self) -> bool:
        """Opening must come strictly before closing for the shelter to ever be open."""
        return self.opening_time < self.closing_time

    def get_hours_for_day(self, day: DateTime) -> TimeRange | None:
        """
        Get the opening hours range for a specific day.
        Returns None if the window is empty.
        """
        if not self.is_valid():
            return None

        start = day.set(
            hour=self.opening_time.hour,
            minute=self.opening_time.minute,
            second=self.opening_time.second,
            microsecond=self.opening_time.microsecond
        )
        end = day.set(
            hour=self.closing_time.hour,
            minute=self.closing_time.minute,
            second=self.closing_time.second,
            microsecond=self.closing_time.microsecond
        )

        return TimeRange(start=start, end=end)

    def __str__(self) -> str:
        return f"{self.opening_time.strftime('%H:%M')} - {self.closing_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class TimeBlock:
    """A free time-of-day window on a given date."""
    date: Date
    start: time
    end: time

    def duration_minutes(self) -> int:
        start_seconds = self.start.hour * 3600 + self.start.minute * 60 + self.start.second
        end_seconds = self.end.hour * 3600 + self.end.minute * 60 + self.end.second
        return (end_seconds - start_seconds) // 60


@dataclass
class DailySchedule:
    """Everything known about one day of a weekly schedule."""
    date: Date
    available: List[TimeBlock] = field(default_factory=list)
    reserved: List[Slot] = field(default_factory=list)
    unavailable: List[Slot] = field(default_factory=list)


@dataclass
class WeeklySchedule:
    """Seven consecutive daily schedules for a shelter (and optionally one animal)."""
    start_date: Date
    shelter_id: str
    animal_id: str | None = None
    days: List[DailySchedule] = field(default_factory=list)

    def day(self, date: Date) -> DailySchedule | None:
        """Return the schedule for a date, or None if it falls outside the week."""
        for daily in self.days:
            if daily.date == date:
                return daily
        return None
