"""
Configuration and parameter loading using Pydantic.

This module provides centralized configuration management for the entire application.
All parameters are loaded from YAML and validated using Pydantic models.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from personal_health_tracker.utils.exceptions import ConfigurationError


class StorageConfig(BaseModel):
    """On-device storage configuration."""

    backend: str = Field("json", pattern="^(json|memory)$")
    dir: str = "data"


class GoalsConfig(BaseModel):
    """Daily goals used for dashboard progress ratios."""

    steps: float = Field(10000, gt=0)
    calories: float = Field(2000, gt=0)
    water: float = Field(8, gt=0)


class TrackerConfig(BaseModel):
    """Tracker behaviour configuration."""

    timezone: str = "UTC"
    water_increment_liters: float = Field(0.25, gt=0)


class ExportFilesConfig(BaseModel):
    """Export file names configuration."""

    activities: str = "activities.csv"
    tips: str = "health_tips.csv"
    daily_totals: str = "daily_totals.csv"


class ExportConfig(BaseModel):
    """CSV export configuration."""

    dir: str = "output"
    files: ExportFilesConfig = Field(default_factory=ExportFilesConfig)


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _normalize_level(value: str) -> str:
    if value.upper() not in LOG_LEVELS:
        raise ValueError(f"unknown log level {value!r}")
    return value.upper()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    console: bool = True
    # Per-logger overrides; the store logs every record it appends or loads
    levels: dict[str, str] = Field(
        default_factory=lambda: {"personal_health_tracker.services.record_store": "WARNING"}
    )

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        return _normalize_level(value)

    @field_validator("levels")
    @classmethod
    def _check_levels(cls, value: dict[str, str]) -> dict[str, str]:
        return {name: _normalize_level(level) for name, level in value.items()}


class AppConfig(BaseSettings):
    """Main application configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    goals: GoalsConfig = Field(default_factory=GoalsConfig)
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="PHT_", env_nested_delimiter="__", case_sensitive=False
    )


class ParameterLoader:
    """
    Centralized parameter loader for the application.

    Loads and validates configuration from YAML files using Pydantic models.
    Provides type-safe access to all configuration parameters.
    """

    def __init__(self, config_path: str = "config/config.yaml") -> None:
        """
        Initialize parameter loader.

        Args:
            config_path: Path to the YAML configuration file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        self.config_path = Path(config_path)
        self.config: AppConfig
        self._load_config()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}

            if not isinstance(config_dict, dict):
                raise ConfigurationError(
                    f"Configuration root must be a mapping, got {type(config_dict).__name__}"
                )

            self.config = AppConfig(**config_dict)

        except ConfigurationError:
            raise
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def get_storage_config(self) -> StorageConfig:
        """Get storage configuration."""
        return self.config.storage

    def get_goals_config(self) -> GoalsConfig:
        """Get daily goals configuration."""
        return self.config.goals

    def get_tracker_config(self) -> TrackerConfig:
        """Get tracker configuration."""
        return self.config.tracker

    def get_export_config(self) -> ExportConfig:
        """Get export configuration."""
        return self.config.export

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging

    def get_raw_config(self) -> dict[str, Any]:
        """
        Get raw configuration dictionary.

        Returns:
            Dictionary representation of the configuration.
        """
        return self.config.model_dump()
