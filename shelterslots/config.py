"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path
from typing import List

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import ShelterHours


class ShelterConfig(BaseModel):
    """Shelter and its daily opening hours."""
    id: str
    name: str = ""
    opening_time: time = time(9, 0)
    closing_time: time = time(18, 0)

    @model_validator(mode="after")
    def validate_hours_order(self) -> "ShelterConfig":
        """Ensure the shelter opens before it closes."""
        if self.closing_time <= self.opening_time:
            raise ValueError(
                f"Shelter '{self.id}': opening_time must be earlier than closing_time"
            )
        return self

    def display_name(self) -> str:
        """Get display name."""
        return self.name or self.id

    def get_hours(self) -> ShelterHours:
        """Get the opening hours as a domain object."""
        return ShelterHours(opening_time=self.opening_time, closing_time=self.closing_time)


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Lisbon"
    data_file: Path = Path("slots.json")
    shelters: List[ShelterConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("shelters")
    @classmethod
    def validate_shelters(cls, value: List[ShelterConfig]) -> List[ShelterConfig]:
        """Ensure shelter ids are unique."""
        seen_ids: set[str] = set()
        for shelter in value:
            key = shelter.id.lower()
            if key in seen_ids:
                raise ValueError(f"Duplicate shelter id detected: {shelter.id}")
            seen_ids.add(key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``data_file`` is resolved against the config file's directory.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        if not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file

        return config

    def find_shelter(self, shelter_id: str) -> ShelterConfig | None:
        """Find a shelter by its id."""
        for shelter in self.shelters:
            if shelter.id.lower() == shelter_id.lower():
                return shelter
        return None

    def resolve_shelter(self, shelter_id: str) -> ShelterConfig:
        """
        Resolve a shelter id to its configuration.

        Raises:
            ValueError: If the shelter is not configured
        """
        shelter = self.find_shelter(shelter_id)
        if shelter is None:
            raise ValueError(
                f"Unknown shelter: '{shelter_id}'. "
                f"Use one of the shelters listed by 'list-shelters'."
            )
        return shelter


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
