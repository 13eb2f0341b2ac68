"""
Configuration Tests
===================

YAML loading, environment overrides and validation.
"""

import pytest
from pydantic import ValidationError

from visimos.config import Settings, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep VISIMOS_* variables from the host out of these tests."""
    for name in (
        "VISIMOS_CONFIG",
        "VISIMOS_CAMERA_INDEX",
        "VISIMOS_PROFILE_DIR",
        "VISIMOS_PROFILE_NAMESPACE",
        "VISIMOS_SPEECH_COOLDOWN_MS",
        "VISIMOS_LEARNING_WINDOW",
        "VISIMOS_LOG_LEVEL",
        "VISIMOS_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for the default configuration."""

    def test_defaults(self):
        settings = Settings()

        assert settings.motion.diff_threshold == 36
        assert settings.motion.stride == 3
        assert settings.motion.min_motion_count == 160
        assert settings.smoothing.idle_size_rate == 0.02
        assert settings.smoothing.motion_size_rate == 0.08
        assert settings.gestures.stop_hold_ms == 900
        assert settings.gestures.swipe_window_ms == 700
        assert settings.learning.window_ticks == 60
        assert settings.speech.cooldown_ms == 2000
        assert settings.persistence.namespace == "visimos_profile_v4"

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            Settings.model_validate({"motion": {"stride": 0}})


class TestLoadConfig:
    """Tests for load_config."""

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "motion:\n"
            "  diff_threshold: 20\n"
            "gestures:\n"
            "  intent_cooldown_ms: 500\n"
        )

        settings = load_config(str(path))

        assert settings.motion.diff_threshold == 20
        assert settings.motion.stride == 3
        assert settings.gestures.intent_cooldown_ms == 500

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_config(str(tmp_path / "absent.yaml"))
        assert settings == Settings()

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Verify environment variables take precedence over the file."""
        path = tmp_path / "config.yaml"
        path.write_text("speech:\n  cooldown_ms: 3000\n")

        monkeypatch.setenv("VISIMOS_SPEECH_COOLDOWN_MS", "1500")
        monkeypatch.setenv("VISIMOS_PROFILE_DIR", str(tmp_path / "profiles"))
        monkeypatch.setenv("VISIMOS_LEARNING_WINDOW", "30")
        monkeypatch.setenv("VISIMOS_CAMERA_INDEX", "2")

        settings = load_config(str(path))

        assert settings.speech.cooldown_ms == 1500
        assert settings.persistence.directory == str(tmp_path / "profiles")
        assert settings.learning.window_ticks == 30
        assert settings.camera.index == 2

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("logging:\n  level: DEBUG\n")
        monkeypatch.setenv("VISIMOS_CONFIG", str(path))

        assert load_config().logging.level == "DEBUG"
