"""
Configuration management using Pydantic models loaded from YAML.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class DefaultsConfig(BaseModel):
    """Default settings for availability lookups."""
    min_duration_minutes: int = 0

    @field_validator("min_duration_minutes")
    @classmethod
    def validate_min_duration(cls, value: int) -> int:
        """Ensure the minimum slot duration is not negative."""
        if value < 0:
            raise ValueError("min_duration_minutes must not be negative")
        return value


class StoreConfig(BaseModel):
    """Connection settings for the hosted record store."""
    model_config = ConfigDict(validate_default=True)

    url: str = Field(default_factory=lambda: os.getenv("SUPABASE_URL", ""))
    api_key: str = Field(default_factory=lambda: os.getenv("SUPABASE_ANON_KEY", ""))
    timeout_seconds: int = 30
    availability_table: str = "tutor_availability"
    bookings_table: str = "bookings"

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: int) -> int:
        """Ensure request timeout is positive."""
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def is_complete(self) -> bool:
        """Check whether URL and API key are both set."""
        return bool(self.url and self.api_key)


class AppConfig(BaseModel):
    """Application configuration."""
    store: StoreConfig = Field(default_factory=StoreConfig)
    active_booking_status: str = "upcoming"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Ensure the log level is a standard level name."""
        level = value.upper()
        if level not in LOG_LEVELS:
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

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of tutorslots/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
