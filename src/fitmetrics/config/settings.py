"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from fitmetrics.analytics.periods import validate_range
from fitmetrics.analytics.timeseries import WEEKDAYS

OUTPUT_FORMATS = ("table", "json")


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".fitmetrics"


def _default_config_path() -> Path:
    """Return the default config file path."""
    return _default_config_dir() / "config.yaml"


@dataclass
class TimeConfig:
    """Calendar configuration.

    The timezone fixes which calendar day a timestamp belongs to.
    """

    timezone: str = "UTC"
    week_starts_on: str = "monday"


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    range: str = "30d"  # "7d", "30d", "90d", "1y", "all"
    output_format: str = "table"  # "table", "json"


@dataclass
class Settings:
    """Main application settings."""

    time: TimeConfig = field(default_factory=TimeConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @property
    def zone(self) -> ZoneInfo:
        """Reference zone for calendar-day conversion."""
        return ZoneInfo(self.time.timezone)

    @property
    def week_start(self) -> int:
        """Weekday weeks start on (0 = Monday ... 6 = Sunday)."""
        return WEEKDAYS[self.time.week_starts_on]

    def validate(self) -> None:
        """Check settings values.

        Raises:
            ValueError: If any value is invalid
        """
        try:
            ZoneInfo(self.time.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {self.time.timezone}") from None
        if self.time.week_starts_on not in WEEKDAYS:
            raise ValueError(
                f"week_starts_on must be one of {tuple(WEEKDAYS)}, "
                f"got '{self.time.week_starts_on}'"
            )
        validate_range(self.defaults.range)
        if self.defaults.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {OUTPUT_FORMATS}, "
                f"got '{self.defaults.output_format}'"
            )

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.fitmetrics/config.yaml

        Returns:
            Settings instance

        Raises:
            ValueError: If the file holds invalid values
        """
        if config_path is None:
            config_path = _default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse time config
        if "time" in data:
            time_data = data["time"] or {}
            if "timezone" in time_data:
                settings.time.timezone = str(time_data["timezone"])
            if "week_starts_on" in time_data:
                settings.time.week_starts_on = str(time_data["week_starts_on"]).lower()

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "range" in def_data:
                settings.defaults.range = str(def_data["range"])
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]

        settings.validate()
        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.fitmetrics/config.yaml
        """
        if config_path is None:
            config_path = _default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "time": {
                "timezone": self.time.timezone,
                "week_starts_on": self.time.week_starts_on,
            },
            "defaults": {
                "range": self.defaults.range,
                "output_format": self.defaults.output_format,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
