"""
Assembly of a seven-day schedule from normalized slots and free blocks.
"""

from typing import Dict, Iterable, List, Sequence, TypeVar

from pendulum import Date

from .availability import DAYS_PER_WEEK
from .models import DailySchedule, Slot, TimeBlock, WeeklySchedule

T = TypeVar("T")


class ScheduleAssembler:
    """Buckets reserved, unavailable and free time into daily schedules."""

    def assemble_week(
        self,
        reserved: Sequence[Slot],
        unavailable: Sequence[Slot],
        available: Sequence[TimeBlock],
        start_date: Date,
        shelter_id: str,
        animal_id: str | None = None
    ) -> WeeklySchedule:
        """
        Build a weekly schedule with exactly seven days from ``start_date``.

        Entries dated outside the week are ignored; days without entries get
        empty lists.
        """
        available_by_day = _group_by_date(available, key=lambda block: block.date)
        reserved_by_day = _group_by_date(reserved, key=lambda slot: slot.start.date())
        unavailable_by_day = _group_by_date(unavailable, key=lambda slot: slot.start.date())

        schedule = WeeklySchedule(
            start_date=start_date,
            shelter_id=shelter_id,
            animal_id=animal_id
        )

        for offset in range(DAYS_PER_WEEK):
            day = start_date.add(days=offset)
            schedule.days.append(
                DailySchedule(
                    date=day,
                    available=available_by_day.get(day, []),
                    reserved=reserved_by_day.get(day, []),
                    unavailable=unavailable_by_day.get(day, [])
                )
            )

        return schedule


def _group_by_date(items: Iterable[T], key) -> Dict[Date, List[T]]:
    grouped: Dict[Date, List[T]] = {}
    for item in items:
        grouped.setdefault(key(item), []).append(item)
    return grouped
