"""
Free-time calculation for a shelter week.
"""

from datetime import time
from typing import Dict, Iterable, List, Tuple

from pendulum import Date

from .models import Slot, SlotStatus, TimeBlock

DAYS_PER_WEEK = 7


class AvailabilityCalculator:
    """
    Calculates the free time blocks of a week from occupied slots.

    Expects normalized fragments (single-day, clipped to opening hours):
    1. Ignore slots marked available and slots starting outside the week
    2. Group the remaining occupied intervals by date
    3. For each day, walk the occupied intervals in order and emit the gaps
    4. Days without occupied intervals are free from opening to closing
    """

    def calculate_weekly_available_ranges(
        self,
        slots: Iterable[Slot],
        opening: time,
        closing: time,
        week_start: Date
    ) -> List[TimeBlock]:
        """
        Calculate all available time blocks for the week starting at ``week_start``.

        Returns blocks ordered by date, then by start time. An empty opening
        window (opening at or after closing) yields no blocks at all.
        """
        if opening >= closing:
            return []

        occupied_by_date = self._group_occupied_by_date(slots, week_start)

        blocks: List[TimeBlock] = []

        for offset in range(DAYS_PER_WEEK):
            day = week_start.add(days=offset)
            occupied = occupied_by_date.get(day)

            if not occupied:
                blocks.append(TimeBlock(date=day, start=opening, end=closing))
                continue

            blocks.extend(self._free_blocks_for_day(day, occupied, opening, closing))

        return blocks

    def _group_occupied_by_date(
        self,
        slots: Iterable[Slot],
        week_start: Date
    ) -> Dict[Date, List[Tuple[time, time]]]:
        week_end = week_start.add(days=DAYS_PER_WEEK)
        occupied_by_date: Dict[Date, List[Tuple[time, time]]] = {}

        for slot in slots:
            if slot.status == SlotStatus.AVAILABLE:
                continue

            day = slot.start.date()
            if not week_start <= day < week_end:
                continue

            # A fragment should not cross midnight; if it does, it occupies the rest of the day
            end = slot.end.time() if slot.end.date() == day else time.max
            occupied_by_date.setdefault(day, []).append((slot.start.time(), end))

        return occupied_by_date

    def _free_blocks_for_day(
        self,
        day: Date,
        occupied: List[Tuple[time, time]],
        opening: time,
        closing: time
    ) -> List[TimeBlock]:
        """
        Emit the gaps between occupied intervals inside [opening, closing).

        Example:
        Opening: 09:00 - 18:00
        Occupied: [10:00-11:00, 10:30-12:00, 15:00-16:00]
        Result: [09:00-10:00, 12:00-15:00, 16:00-18:00]
        """
        free: List[TimeBlock] = []
        current = opening

        for start, end in sorted(occupied):
            if end <= opening or start >= closing:
                continue

            if start > current:
                free.append(TimeBlock(date=day, start=current, end=start))

            current = max(current, end)

        if current < closing:
            free.append(TimeBlock(date=day, start=current, end=closing))

        return free
