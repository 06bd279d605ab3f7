"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path
from typing import Annotated, Any, Optional

import pendulum
import yaml
from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, field_validator

from .domain.models import ReservationSettings


def _reject_unquoted_time(value: Any) -> Any:
    # YAML 1.1 reads an unquoted 17:00 as the sexagesimal integer 1020
    if isinstance(value, (time, str)):
        return value
    raise ValueError(
        f"Expected a quoted 'HH:MM' time, got {value!r}. Unquoted YAML times such as 17:00 are read as numbers."
    )


def _require_naive(value: time) -> time:
    if value.tzinfo is not None:
        raise ValueError(f"Time {value} must be a wall-clock time without timezone")
    return value


# Wall-clock time of day as written in config and data files
WallTime = Annotated[time, BeforeValidator(_reject_unquoted_time), AfterValidator(_require_naive)]


class SettingsDefaults(BaseModel):
    """Settings applied to a business that has none stored yet."""
    default_start: WallTime = time(8, 0)
    default_end: WallTime = time(0, 0)  # Midnight, clamped to 23:59
    slot_duration_minutes: int = 30
    max_advance_booking_days: int = 30
    min_advance_booking_hours: int = 2
    accept_reservations: bool = True
    auto_confirm: bool = True

    @field_validator("slot_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure slot duration is positive."""
        if value <= 0:
            raise ValueError("slot_duration_minutes must be greater than zero")
        return value

    @field_validator("max_advance_booking_days", "min_advance_booking_hours")
    @classmethod
    def validate_advance(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"Advance booking limits must not be negative, got {value}")
        return value

    def build(self, business_id: str) -> ReservationSettings:
        """Create a settings record for the business from these defaults."""
        return ReservationSettings(business_id=business_id, **self.model_dump())


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    data_file: Optional[Path] = None
    settings_defaults: SettingsDefaults = Field(default_factory=SettingsDefaults)
    week_days: int = 7
    month_days: int = 30
    max_range_days: int = 31
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("week_days", "month_days", "max_range_days")
    @classmethod
    def validate_span(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"Day spans must not be negative, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

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

        # Relative data files are resolved against the config file location
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.cwd() / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load an explicit config file, else ./config.yaml if present, else defaults.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    return AppConfig()
