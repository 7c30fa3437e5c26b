"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.models import DEFAULT_DAYS, DEFAULT_TIMESLOT_INTERVAL
from .services.availability import REFERENCE_DATE

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class DefaultsConfig(BaseModel):
    """Default request settings."""
    days: int = DEFAULT_DAYS
    timeslot_interval: int = DEFAULT_TIMESLOT_INTERVAL

    @field_validator("days", "timeslot_interval")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure defaults are positive."""
        if value <= 0:
            raise ValueError(f"must be greater than zero, got {value}")
        return value


class DataConfig(BaseModel):
    """Location of the events and work hour data files."""
    events_path: Path = Path("data/events.json")
    workhours_path: Path = Path("data/workhours.json")
    cache_ttl_seconds: float = 0.0  # 0 disables caching

    @field_validator("cache_ttl_seconds")
    @classmethod
    def validate_ttl(cls, value: float) -> float:
        """Ensure the cache TTL is not negative."""
        if value < 0:
            raise ValueError(f"cache_ttl_seconds must not be negative, got {value}")
        return value

    def resolve_paths(self, base_dir: Path) -> "DataConfig":
        """Return a copy with relative paths anchored at base_dir."""
        return self.model_copy(
            update={
                "events_path": _anchor(self.events_path, base_dir),
                "workhours_path": _anchor(self.workhours_path, base_dir),
            }
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    # None measures day_modifier from the live clock
    reference_date: Optional[date] = REFERENCE_DATE
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the default timezone is a valid IANA identifier."""
        try:
            pendulum.timezone(value)
        except (ValueError, LookupError, OSError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalise and check the log level name."""
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value}")
        return level

    def get_log_level(self) -> int:
        """Get the log level as a logging constant."""
        return getattr(logging, self.log_level)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative data paths are resolved against the directory of the file.

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
        config.data = config.data.resolve_paths(config_path.resolve().parent)
        return config


def _anchor(path: Path, base_dir: Path) -> Path:
    return path if path.is_absolute() else base_dir / path


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of timetabler/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
