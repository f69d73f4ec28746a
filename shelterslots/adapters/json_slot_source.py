"""
Slot source backed by a JSON export of reservations and unavailability records.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pendulum
from pendulum import DateTime
from pydantic import BaseModel, ValidationError, model_validator

from ..domain.exceptions import SlotSourceError
from ..domain.models import (
    ActivitySlot,
    ShelterUnavailabilitySlot,
    Slot,
    SlotStatus,
    SlotType,
)

logger = logging.getLogger(__name__)


class SlotRecord(BaseModel):
    """One slot as stored in the JSON export."""
    id: str
    type: SlotType
    start: str
    end: str
    status: SlotStatus
    created_at: str | None = None
    updated_at: str | None = None
    activity_id: str | None = None
    animal_id: str | None = None
    shelter_id: str | None = None
    reason: str | None = None

    @model_validator(mode="after")
    def validate_variant_fields(self) -> "SlotRecord":
        """Ensure each variant carries the reference it cannot live without."""
        if self.type == SlotType.ACTIVITY and not self.activity_id:
            raise ValueError("activity slots require an activity_id")
        if self.type == SlotType.SHELTER_UNAVAILABLE and not self.shelter_id:
            raise ValueError("shelter_unavailable slots require a shelter_id")
        return self

    def to_slot(self, timezone: str) -> Slot:
        """Convert the record into its domain slot variant."""
        common = dict(
            id=self.id,
            start=_parse_datetime(self.start, timezone),
            end=_parse_datetime(self.end, timezone),
            status=self.status,
            created_at=_parse_datetime(self.created_at, timezone) if self.created_at else None,
            updated_at=_parse_datetime(self.updated_at, timezone) if self.updated_at else None,
        )

        if self.type == SlotType.ACTIVITY:
            return ActivitySlot(
                activity_id=self.activity_id,
                animal_id=self.animal_id,
                shelter_id=self.shelter_id,
                **common
            )

        return ShelterUnavailabilitySlot(
            shelter_id=self.shelter_id,
            reason=self.reason,
            **common
        )


def _parse_datetime(value: str, timezone: str) -> DateTime:
    parsed = pendulum.parse(value, tz=timezone)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Expected a date and time, got '{value}'")
    return parsed


class JsonSlotSource:
    """
    Loads slots from a JSON file of the form ``{"slots": [...]}``.

    The file is read once, on first use. Timestamps without an offset are
    interpreted in ``timezone``.
    """

    def __init__(self, data_file: Path, timezone: str = "Europe/Lisbon"):
        """
        Initialize the source.

        Args:
            data_file: Path to the JSON export
            timezone: IANA timezone identifier for naive timestamps
        """
        self.data_file = Path(data_file)
        self.timezone = timezone
        self._slots: List[Slot] | None = None

    def load(self) -> List[Slot]:
        """
        Read and validate every slot in the file.

        Raises:
            SlotSourceError: If the file is missing, is not valid JSON, or
                contains an invalid record
        """
        if self._slots is not None:
            return self._slots

        if not self.data_file.exists():
            raise SlotSourceError(f"Slot data file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise SlotSourceError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        if not isinstance(data, dict) or not isinstance(data.get("slots", []), list):
            raise SlotSourceError(f"{self.data_file} must contain a 'slots' list at the root level.")

        self._slots = [
            self._parse_record(index, raw)
            for index, raw in enumerate(data.get("slots", []))
        ]
        logger.info("Loaded %d slot(s) from %s", len(self._slots), self.data_file)

        return self._slots

    def _parse_record(self, index: int, raw: Dict[str, Any]) -> Slot:
        try:
            return SlotRecord.model_validate(raw).to_slot(self.timezone)
        except (ValidationError, ValueError) as exc:
            record_id = raw.get("id", f"#{index}") if isinstance(raw, dict) else f"#{index}"
            raise SlotSourceError(f"Invalid slot record {record_id}: {exc}") from exc

    async def get_slots(
        self,
        shelter_id: str,
        start: DateTime,
        end: DateTime,
        animal_id: str | None = None,
    ) -> List[Slot]:
        """
        Return the slots of one shelter overlapping [start, end).

        Args:
            shelter_id: Shelter whose unavailability windows are wanted
            start: Start of the time window
            end: End of the time window
            animal_id: Restrict activity slots to this animal

        Returns:
            Activity and unavailability slots in file order
        """
        selected: List[Slot] = []

        for slot in self.load():
            if not (slot.start < end and slot.end > start):
                continue

            if isinstance(slot, ActivitySlot):
                if animal_id is not None and slot.animal_id != animal_id:
                    continue
                if slot.shelter_id is not None and slot.shelter_id != shelter_id:
                    continue
            elif slot.shelter_id != shelter_id:
                continue

            selected.append(slot)

        logger.debug("Selected %d slot(s) for shelter %s", len(selected), shelter_id)

        return selected
