"""
Tests for configuration loading.
"""

from datetime import time
from pathlib import Path

import pytest
from pydantic import ValidationError

from slotresolver.config import AppConfig, SettingsDefaults, load_config


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        """Defaults match the documented values."""
        config = AppConfig()

        assert config.timezone == "UTC"
        assert config.data_file is None
        assert config.week_days == 7
        assert config.month_days == 30
        assert config.max_range_days == 31
        assert config.log_level == "WARNING"
        assert config.settings_defaults.slot_duration_minutes == 30
        assert config.settings_defaults.default_end == time(0, 0)

    def test_load_from_yaml(self, tmp_path):
        """Values and nested defaults are read from YAML."""
        path = _write(
            tmp_path / "config.yaml",
            "timezone: Europe/Istanbul\n"
            "log_level: info\n"
            "week_days: 6\n"
            "settings_defaults:\n"
            "  default_start: '10:00'\n"
            "  slot_duration_minutes: 20\n",
        )

        config = AppConfig.load_from_yaml(path)

        assert config.timezone == "Europe/Istanbul"
        assert config.log_level == "INFO"
        assert config.week_days == 6
        assert config.settings_defaults.default_start == time(10, 0)
        assert config.settings_defaults.slot_duration_minutes == 20

    def test_relative_data_file(self, tmp_path):
        """A relative data file is resolved against the config directory."""
        path = _write(tmp_path / "config.yaml", "data_file: data/store.yaml\n")

        config = AppConfig.load_from_yaml(path)

        assert config.data_file == tmp_path / "data" / "store.yaml"

    def test_empty_file_uses_defaults(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path / "config.yaml", ""))

        assert config == AppConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.example.yaml"):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(_write(tmp_path / "config.yaml", "- a\n- b\n"))

    def test_unquoted_time(self, tmp_path):
        """An unquoted 17:00 is read by YAML as a number and rejected at load time."""
        path = _write(
            tmp_path / "config.yaml",
            "settings_defaults:\n"
            "  default_start: '09:00'\n"
            "  default_end: 17:00\n",
        )

        with pytest.raises(ValueError, match="quoted 'HH:MM' time"):
            AppConfig.load_from_yaml(path)

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write(tmp_path / "config.yaml", "timezone: [unclosed\n"))

    @pytest.mark.parametrize(
        "values",
        [
            {"timezone": "Mars/Olympus"},
            {"log_level": "LOUD"},
            {"week_days": -1},
            {"settings_defaults": {"slot_duration_minutes": 0}},
            {"settings_defaults": {"min_advance_booking_hours": -2}},
            {"settings_defaults": {"default_end": 1020}},
            {"settings_defaults": {"default_start": "09:00+03:00"}},
        ],
    )
    def test_invalid_values(self, values):
        """Invalid values are rejected by validation."""
        with pytest.raises(ValidationError):
            AppConfig(**values)


class TestLoadConfig:
    """Tests for config resolution."""

    def test_explicit_path(self, tmp_path):
        path = _write(tmp_path / "custom.yaml", "month_days: 14\n")

        assert load_config(path).month_days == 14

    def test_default_path_in_cwd(self, tmp_path, monkeypatch):
        """./config.yaml is used when present."""
        _write(tmp_path / "config.yaml", "max_range_days: 10\n")
        monkeypatch.chdir(tmp_path)

        assert load_config().max_range_days == 10

    def test_no_config_file(self, tmp_path, monkeypatch):
        """Without any config file the defaults apply."""
        monkeypatch.chdir(tmp_path)

        assert load_config() == AppConfig()


class TestSettingsDefaults:
    """Tests for SettingsDefaults."""

    def test_build(self):
        settings = SettingsDefaults(auto_confirm=False).build("biz")

        assert settings.business_id == "biz"
        assert settings.auto_confirm is False
        assert settings.default_start == time(8, 0)
        assert settings.created_at is None
