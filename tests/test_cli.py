"""
Tests for the command line interface.
"""

import json

import pytest
from typer.testing import CliRunner

from shelterslots.cli.app import app

runner = CliRunner()

SLOTS = {
    "slots": [
        {
            "id": "a1",
            "type": "activity",
            "start": "2025-01-06 16:00",
            "end": "2025-01-07 10:00",
            "status": "reserved",
            "activity_id": "visit-1",
            "animal_id": "rex",
            "shelter_id": "north",
        },
        {
            "id": "u1",
            "type": "shelter_unavailable",
            "start": "2025-01-08 07:00",
            "end": "2025-01-08 12:00",
            "status": "unavailable",
            "shelter_id": "north",
            "reason": "Vet visit",
        },
    ]
}


@pytest.fixture
def config_path(tmp_path):
    (tmp_path / "slots.json").write_text(json.dumps(SLOTS), encoding="utf-8")
    path = tmp_path / "config.yaml"
    path.write_text(
        "timezone: Europe/Lisbon\n"
        "data_file: slots.json\n"
        "shelters:\n"
        "  - id: north\n"
        "    name: North Shelter\n"
        "    opening_time: '09:00'\n"
        "    closing_time: '18:00'\n",
        encoding="utf-8",
    )
    return path


def test_normalize_lists_fragments(config_path):
    """The overnight reservation shows up as two fragments."""
    result = runner.invoke(
        app,
        ["normalize", "north", "--start", "2025-01-06", "--end", "2025-01-09", "--config", str(config_path)],
    )

    assert result.exit_code == 0, result.output
    assert "16:00 - 18:00" in result.output
    assert "09:00 - 10:00" in result.output
    assert "Vet visit" in result.output


def test_week_shows_seven_days(config_path):
    """The weekly table contains free time for an untouched day."""
    result = runner.invoke(
        app, ["week", "north", "--start", "2025-01-06", "--animal", "rex", "-c", str(config_path)]
    )

    assert result.exit_code == 0, result.output
    assert "12:00 - 18:00" in result.output


def test_check_free_slot(config_path):
    """A free visit is accepted."""
    result = runner.invoke(
        app,
        ["check", "north", "rex", "--start", "2025-01-07 10:00", "--end", "2025-01-07 11:00", "-c", str(config_path)],
    )

    assert result.exit_code == 0, result.output
    assert "Slot is free" in result.output


def test_check_conflict(config_path):
    """A visit during a closure is rejected with exit code 1."""
    result = runner.invoke(
        app,
        ["check", "north", "rex", "--start", "2025-01-08 11:00", "--end", "2025-01-08 12:30", "-c", str(config_path)],
    )

    assert result.exit_code == 1
    assert "Shelter is unavailable" in result.output


def test_unknown_shelter(config_path):
    """Unknown shelters are reported."""
    result = runner.invoke(app, ["week", "south", "-c", str(config_path)])

    assert result.exit_code == 1
    assert "Unknown shelter" in result.output


def test_list_shelters(config_path):
    """Configured shelters are listed with their hours."""
    result = runner.invoke(app, ["list-shelters", "-c", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "North Shelter" in result.output
    assert "09:00 - 18:00" in result.output
