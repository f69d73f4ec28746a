"""
Tests for YAML configuration loading.
"""

from datetime import time

import pytest

from shelterslots.config import AppConfig, ShelterConfig

CONFIG_YAML = """
timezone: Europe/Lisbon
data_file: data/slots.json
shelters:
  - id: north
    name: North Shelter
    opening_time: "09:00"
    closing_time: "18:00"
  - id: east
    opening_time: "10:30"
    closing_time: "17:00"
"""


def test_load_from_yaml(tmp_path):
    """Shelters, hours and the data file path are loaded."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(CONFIG_YAML, encoding="utf-8")

    config = AppConfig.load_from_yaml(config_path)

    assert config.timezone == "Europe/Lisbon"
    assert config.data_file == tmp_path / "data" / "slots.json"
    north = config.resolve_shelter("NORTH")
    assert north.get_hours().opening_time == time(9, 0)
    assert config.find_shelter("east").display_name() == "east"


def test_missing_config_file(tmp_path):
    """A missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_yaml(tmp_path / "config.yaml")


def test_invalid_yaml(tmp_path):
    """Broken YAML is reported as ValueError."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("shelters: [", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        AppConfig.load_from_yaml(config_path)


def test_opening_must_precede_closing():
    """Shelter hours are validated."""
    with pytest.raises(ValueError, match="opening_time must be earlier"):
        ShelterConfig(id="x", opening_time=time(18, 0), closing_time=time(9, 0))


def test_duplicate_shelter_ids():
    """Shelter ids must be unique."""
    with pytest.raises(ValueError, match="Duplicate shelter id"):
        AppConfig(shelters=[ShelterConfig(id="a"), ShelterConfig(id="A")])


def test_unknown_timezone():
    """Timezones must be IANA names."""
    with pytest.raises(ValueError, match="Unknown timezone"):
        AppConfig(timezone="Mars/Olympus")


def test_unknown_shelter():
    """Resolving an unconfigured shelter fails."""
    with pytest.raises(ValueError, match="Unknown shelter"):
        AppConfig().resolve_shelter("nowhere")
