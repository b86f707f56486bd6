"""
Tests for configuration module.
"""

import pytest
from pydantic import ValidationError

from config.settings import Settings, get_settings, reload_settings


class TestSettings:
    """Test Settings class defaults and methods."""

    def test_pitch_defaults(self):
        s = Settings(_env_file=None)
        assert s.pitch_length == 105.0
        assert s.pitch_width == 68.0
        assert s.half_length == 52.5
        assert s.half_width == 34.0

    def test_analytics_and_playback_defaults(self):
        s = Settings(_env_file=None)
        assert s.collision_threshold == 3.0
        assert s.default_duration == 15.0
        assert s.default_speed == 1.0
        assert s.loop_playback is False
        assert s.eraser_radius == 2.0

    def test_db_connection_string_default_sqlite(self, test_settings):
        assert test_settings.db_connection_string.startswith("sqlite:///")
        assert test_settings.db_connection_string.endswith("tactical_board.db")

    def test_db_connection_string_override(self):
        s = Settings(_env_file=None, database_url="sqlite:///test.db")
        assert s.db_connection_string == "sqlite:///test.db"

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_speed_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_speed=0)

    def test_invalid_frame_rate_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, frame_rate=0)

    def test_eraser_larger_than_pitch_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, pitch_length=10.0, pitch_width=5.0, eraser_radius=6.0)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("COLLISION_THRESHOLD", "4.5")
        assert Settings(_env_file=None).collision_threshold == 4.5

    def test_output_dir_created(self, test_settings):
        path = test_settings.get_output_dir()
        assert path.exists()


class TestSettingsAccess:

    def test_get_settings_returns_instance(self):
        assert isinstance(get_settings(), Settings)

    def test_reload_settings(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_DURATION", "30")
        try:
            assert reload_settings().default_duration == 30.0
        finally:
            monkeypatch.delenv("DEFAULT_DURATION")
            reload_settings()
