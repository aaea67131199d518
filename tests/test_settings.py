"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from fitmetrics.config.settings import Settings, reload_settings


class TestSettings:
    """Tests for Settings.load and save."""

    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        settings = Settings.load(tmp_path / "missing.yaml")
        assert settings.time.timezone == "UTC"
        assert settings.defaults.range == "30d"
        assert settings.week_start == 0

    def test_load_values(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "time:\n  timezone: Europe/Berlin\n  week_starts_on: Sunday\n"
            "defaults:\n  range: 90d\n  output_format: json\n"
        )
        settings = Settings.load(path)
        assert settings.zone == ZoneInfo("Europe/Berlin")
        assert settings.week_start == 6
        assert settings.defaults.range == "90d"
        assert settings.defaults.output_format == "json"

    def test_partial_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("defaults:\n  range: 7d\n")
        settings = Settings.load(path)
        assert settings.defaults.range == "7d"
        assert settings.time.timezone == "UTC"

    @pytest.mark.parametrize(
        "content,message",
        [
            ("time:\n  timezone: Mars/Olympus\n", "timezone"),
            ("time:\n  week_starts_on: someday\n", "week_starts_on"),
            ("defaults:\n  range: 2w\n", "range"),
            ("defaults:\n  output_format: xml\n", "output_format"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, content: str, message: str) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(content)
        with pytest.raises(ValueError, match=message):
            Settings.load(path)

    def test_save_round_trip(self, tmp_path: Path) -> None:
        settings = Settings()
        settings.time.timezone = "America/Chicago"
        settings.defaults.range = "1y"
        path = tmp_path / "nested" / "config.yaml"
        settings.save(path)
        loaded = Settings.load(path)
        assert loaded.time.timezone == "America/Chicago"
        assert loaded.defaults.range == "1y"

    def test_reload_settings(self, utc_config: Path) -> None:
        settings = reload_settings(utc_config)
        assert settings.defaults.range == "7d"
