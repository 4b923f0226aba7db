"""12-factor configuration adapter using environment variables and optional TOML config."""

import logging
import tomllib
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from commute_optimizer.domain.models import OptimizerSettings

# TOML section -> fields it may override
_TOML_SECTIONS: dict[str, tuple[str, ...]] = {
    "optimizer": (
        "sample_interval_minutes",
        "max_samples",
        "min_window_minutes",
        "past_tolerance_seconds",
        "timezone",
    ),
    "traffic": ("heavy_traffic_ratio", "moderate_traffic_ratio"),
    "api": (
        "routes_api_url",
        "geocoding_api_url",
        "api_timeout_seconds",
        "sleep_ms_between_calls",
    ),
}


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider configuration
    google_maps_api_key: str | None = Field(
        default=None, description="Server-side Google Maps Platform API key"
    )
    routes_api_url: str = Field(
        default="https://routes.googleapis.com/directions/v2:computeRoutes",
        description="Google Routes API computeRoutes endpoint",
    )
    geocoding_api_url: str = Field(
        default="https://maps.googleapis.com/maps/api/geocode/json",
        description="Google Geocoding API endpoint",
    )
    api_timeout_seconds: float = Field(
        default=10, description="Timeout for a single provider request in seconds"
    )
    sleep_ms_between_calls: int = Field(
        default=0,
        description="Minimum delay in milliseconds between provider calls to respect rate limits",
    )

    # Sampling policy
    sample_interval_minutes: int = Field(
        default=15, description="Minutes between sampled departure candidates"
    )
    max_samples: int = Field(default=12, description="Maximum number of provider calls per search")
    min_window_minutes: int = Field(
        default=15, description="Minimum remaining window (minutes) required to search"
    )
    past_tolerance_seconds: int = Field(
        default=60, description="How far in the past the earliest departure may be"
    )

    # Traffic classification
    heavy_traffic_ratio: float = Field(
        default=0.5, description="Share of slow segments above which traffic is Heavy"
    )
    moderate_traffic_ratio: float = Field(
        default=0.2, description="Share of slow segments above which traffic is Moderate"
    )

    timezone: str | None = Field(
        default=None,
        description="IANA timezone for interpreting HH:MM input (e.g. 'America/New_York'); "
        "system local time when unset",
    )
    log_level: str = Field(default="INFO", description="Logging level for the CLI")

    config_file: str | None = Field(
        default=None,
        description="Optional TOML file with [optimizer], [traffic] and [api] sections",
    )

    @field_validator("sample_interval_minutes", "max_samples", "min_window_minutes")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate sampling parameters are positive."""
        if v <= 0:
            raise ValueError("sampling parameters must be positive")
        return v

    @field_validator("api_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate the provider timeout is positive."""
        if v <= 0:
            raise ValueError("api_timeout_seconds must be positive")
        return v

    @field_validator("past_tolerance_seconds", "sleep_ms_between_calls")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Validate durations are not negative."""
        if v < 0:
            raise ValueError("durations must not be negative")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Validate timezone is a known IANA name."""
        if v is None or v == "":
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard logging levels."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be DEBUG, INFO, WARNING, ERROR or CRITICAL")
        return level

    @model_validator(mode="after")
    def validate_traffic_ratios(self) -> "AppConfig":
        """Validate traffic ratios are ordered fractions."""
        if not 0 <= self.moderate_traffic_ratio <= self.heavy_traffic_ratio <= 1:
            raise ValueError(
                "traffic ratios must satisfy 0 <= moderate_traffic_ratio <= heavy_traffic_ratio <= 1"
            )
        return self

    def load_toml_overrides(self) -> dict[str, Any]:
        """Apply settings from the TOML config file, if one is configured.

        Returns:
            The parsed TOML data, or an empty dict when no file is configured.
        """
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        updates: dict[str, Any] = {}
        for section, fields in _TOML_SECTIONS.items():
            values = toml_data.get(section, {})
            if not isinstance(values, dict):
                raise ValueError(f"TOML config '{section}' must be a table")
            updates.update({name: values[name] for name in fields if name in values})

        # Traffic ratios are checked as a pair, so validate the merged values
        checked = self.model_validate({**self.model_dump(), **updates})
        for name in updates:
            setattr(self, name, getattr(checked, name))

        return toml_data

    def optimizer_settings(self) -> OptimizerSettings:
        """Build the optimizer sampling policy from this configuration."""
        return OptimizerSettings(
            sample_interval_minutes=self.sample_interval_minutes,
            max_samples=self.max_samples,
            min_window_minutes=self.min_window_minutes,
            past_tolerance_seconds=self.past_tolerance_seconds,
        )

    def logging_level(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)
