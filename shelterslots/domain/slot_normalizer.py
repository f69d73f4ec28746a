"""
Slot normalization against shelter opening hours.

Pure domain logic: takes raw, possibly multi-day and out-of-hours intervals
and turns them into single-day fragments clipped to the shelter's daily
opening window, ordered chronologically. Stateless and free of I/O.
"""

from dataclasses import replace
from datetime import date, time
from typing import Iterable, Iterator, List

from pendulum import DateTime

from .exceptions import InvalidArgumentError, SlotOverflowError
from .models import NormalizedSlots, Slot


class SlotNormalizer:
    """
    Normalizes slots so that they fit within shelter opening hours.

    Algorithm (per input slot):
    1. Drop intervals whose end is not after their start
    2. Split multi-day intervals at midnight into one fragment per day
    3. Clamp each fragment to [opening, closing] on its own day
    4. Drop fragments that collapse to zero or negative duration
    Finally the fragments are ordered by date, then by time of day.

    Fragments are copies of the source slot made with ``dataclasses.replace``,
    so the concrete variant, its payload fields and the ``id`` are preserved.
    """

    def normalize(
        self,
        slots: Iterable[Slot],
        opening: time,
        closing: time
    ) -> NormalizedSlots:
        """
        Normalize a collection of slots to the given opening window.

        Args:
            slots: Slots to normalize (any iterable, may be empty)
            opening: Daily opening time of the shelter
            closing: Daily closing time of the shelter

        Returns:
            NormalizedSlots with the ordered fragments

        Raises:
            InvalidArgumentError: If ``slots`` is None, contains a non-slot,
                or the opening/closing values are not times
            SlotOverflowError: If a multi-day split runs past the last
                representable date
        """
        if slots is None:
            raise InvalidArgumentError("slots must not be None")

        if not isinstance(opening, time) or not isinstance(closing, time):
            raise InvalidArgumentError(
                f"opening and closing must be times, got {opening!r} and {closing!r}"
            )

        fragments: List[Slot] = []

        for slot in slots:
            if not isinstance(slot, Slot):
                raise InvalidArgumentError(f"Expected a Slot, got {type(slot).__name__}")

            for fragment in self._split_multi_day_slot(slot):
                clamped = self._clamp_to_opening_hours(fragment, opening, closing)
                if clamped is not None:
                    fragments.append(clamped)

        fragments.sort(key=lambda s: (s.start.date(), s.start.time()))

        return NormalizedSlots(slots=tuple(fragments))

    def _split_multi_day_slot(self, slot: Slot) -> Iterator[Slot]:
        """
        Split a slot into single-day fragments.

        A fragment never starts before its day's midnight nor ends after the
        next one. An interval ending exactly at midnight contributes nothing
        to the day that midnight opens.
        """
        if slot.end <= slot.start:
            return

        if slot.start.date() == slot.end.date():
            yield slot
            return

        last_day = slot.end.date()
        day_start = slot.start.start_of("day")

        while day_start.date() <= last_day:
            next_day_start = _next_midnight(day_start)

            start = max(slot.start, day_start)
            end = min(slot.end, next_day_start)

            if end > start:
                yield replace(slot, start=start, end=end)

            day_start = next_day_start

    def _clamp_to_opening_hours(
        self,
        slot: Slot,
        opening: time,
        closing: time
    ) -> Slot | None:
        """
        Clamp a single-day fragment to the opening window of its start day.
        Returns None if nothing of the fragment remains.
        """
        opening_at = _at_time_of_day(slot.start, opening)
        closing_at = _at_time_of_day(slot.start, closing)

        start = max(slot.start, opening_at)
        end = min(slot.end, closing_at)

        if end <= start:
            return None

        if start == slot.start and end == slot.end:
            return slot

        return replace(slot, start=start, end=end)


def _at_time_of_day(moment: DateTime, time_of_day: time) -> DateTime:
    return moment.set(
        hour=time_of_day.hour,
        minute=time_of_day.minute,
        second=time_of_day.second,
        microsecond=time_of_day.microsecond
    )


def _next_midnight(day_start: DateTime) -> DateTime:
    message = f"Cannot split slot past {day_start.to_date_string()}: date out of range"

    if day_start.date() >= date.max:
        raise SlotOverflowError(message)

    try:
        return day_start.add(days=1)
    except (OverflowError, ValueError) as exc:
        raise SlotOverflowError(message) from exc
