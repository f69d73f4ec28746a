"""
Tests for the SchedulingService orchestration layer.
"""

import asyncio
from datetime import time
from typing import Dict, List

import pendulum
import pytest

from shelterslots.domain.exceptions import (
    OutsideShelterHoursError,
    SchedulingConflictError,
    ShelterHoursError,
)
from shelterslots.domain.models import (
    ActivitySlot,
    ShelterHours,
    ShelterUnavailabilitySlot,
    Slot,
    SlotStatus,
)
from shelterslots.services.scheduling import SchedulingService

TZ = "Europe/Lisbon"
HOURS = ShelterHours(opening_time=time(9, 0), closing_time=time(18, 0))


def at(value: str):
    return pendulum.parse(value, tz=TZ)


class StubSlotSource:
    """Minimal stub matching SlotSourceProtocol."""

    def __init__(self, slots: List[Slot]):
        self._slots = slots
        self.calls: List[Dict[str, str]] = []

    async def get_slots(self, shelter_id, start, end, animal_id=None):
        self.calls.append(
            {
                "shelter_id": shelter_id,
                "start": start.to_datetime_string(),
                "end": end.to_datetime_string(),
                "animal_id": animal_id,
            }
        )
        return [s for s in self._slots if s.start < end and s.end > start]


def _slots() -> List[Slot]:
    return [
        ActivitySlot(
            id="a1",
            start=at("2025-01-06 16:00"),
            end=at("2025-01-07 10:00"),
            status=SlotStatus.RESERVED,
            activity_id="visit-1",
            animal_id="rex",
        ),
        ShelterUnavailabilitySlot(
            id="u1",
            start=at("2025-01-08 07:00"),
            end=at("2025-01-08 12:00"),
            status=SlotStatus.UNAVAILABLE,
            shelter_id="s1",
            reason="Vet visit",
        ),
    ]


def test_weekly_schedule_uses_normalized_slots():
    """Overnight reservations are split and clipped before being scheduled."""
    source = StubSlotSource(_slots())
    service = SchedulingService(slot_source=source)

    schedule = asyncio.run(
        service.get_weekly_schedule(
            hours=HOURS,
            shelter_id="s1",
            week_start=pendulum.date(2025, 1, 6),
            timezone=TZ,
            animal_id="rex",
        )
    )

    assert source.calls == [
        {
            "shelter_id": "s1",
            "start": "2025-01-06 00:00:00",
            "end": "2025-01-13 00:00:00",
            "animal_id": "rex",
        }
    ]

    monday, tuesday, wednesday = schedule.days[:3]
    assert [(s.start.time(), s.end.time()) for s in monday.reserved] == [(time(16, 0), time(18, 0))]
    assert [(s.start.time(), s.end.time()) for s in tuesday.reserved] == [(time(9, 0), time(10, 0))]
    assert [(s.start.time(), s.end.time()) for s in wednesday.unavailable] == [(time(9, 0), time(12, 0))]

    assert [(b.start, b.end) for b in monday.available] == [(time(9, 0), time(16, 0))]
    assert [(b.start, b.end) for b in tuesday.available] == [(time(10, 0), time(18, 0))]
    assert [(b.start, b.end) for b in wednesday.available] == [(time(12, 0), time(18, 0))]
    assert [(b.start, b.end) for b in schedule.days[3].available] == [(time(9, 0), time(18, 0))]


def test_weekly_schedule_rejects_invalid_hours():
    """A shelter that opens after it closes cannot be scheduled."""
    service = SchedulingService(slot_source=StubSlotSource([]))

    with pytest.raises(ShelterHoursError, match="invalid hours"):
        asyncio.run(
            service.get_weekly_schedule(
                hours=ShelterHours(opening_time=time(18, 0), closing_time=time(9, 0)),
                shelter_id="s1",
                week_start=pendulum.date(2025, 1, 6),
                timezone=TZ,
            )
        )


def test_validate_new_activity_free_slot():
    """A visit in a free window is accepted and only that day is fetched."""
    source = StubSlotSource(_slots())
    service = SchedulingService(slot_source=source)

    proposal = asyncio.run(
        service.validate_new_activity(
            hours=HOURS,
            shelter_id="s1",
            animal_id="rex",
            start=at("2025-01-07 10:00"),
            end=at("2025-01-07 11:00"),
        )
    )

    assert proposal.duration_minutes() == 60
    assert source.calls[0]["start"] == "2025-01-07 00:00:00"
    assert source.calls[0]["end"] == "2025-01-08 00:00:00"


def test_validate_new_activity_conflicts_with_split_reservation():
    """The morning part of an overnight reservation blocks a visit."""
    service = SchedulingService(slot_source=StubSlotSource(_slots()))

    with pytest.raises(SchedulingConflictError) as excinfo:
        asyncio.run(
            service.validate_new_activity(
                hours=HOURS,
                shelter_id="s1",
                animal_id="rex",
                start=at("2025-01-07 09:30"),
                end=at("2025-01-07 10:30"),
            )
        )

    assert [s.id for s in excinfo.value.conflicts] == ["a1"]


def test_validate_new_activity_outside_hours_skips_lookup():
    """Opening hours are checked before any slot is fetched."""
    source = StubSlotSource(_slots())
    service = SchedulingService(slot_source=source)

    with pytest.raises(OutsideShelterHoursError):
        asyncio.run(
            service.validate_new_activity(
                hours=HOURS,
                shelter_id="s1",
                animal_id="rex",
                start=at("2025-01-07 08:00"),
                end=at("2025-01-07 09:30"),
            )
        )

    assert source.calls == []
