"""
Visimos Configuration
=====================

This module handles configuration loading for the orb tracker.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    VISIMOS_CONFIG             -> path of the YAML file to load
    VISIMOS_CAMERA_INDEX       -> camera.index
    VISIMOS_PROFILE_DIR        -> persistence.directory
    VISIMOS_PROFILE_NAMESPACE  -> persistence.namespace
    VISIMOS_SPEECH_COOLDOWN_MS -> speech.cooldown_ms
    VISIMOS_LEARNING_WINDOW    -> learning.window_ticks
    VISIMOS_LOG_LEVEL          -> logging.level
    VISIMOS_LOG_FORMAT         -> logging.format

Example:
    from visimos.config import settings

    print(settings.motion.diff_threshold)
    print(settings.gestures.stop_hold_ms)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class MotionConfig(BaseModel):
    """Luminance sampling and frame differencing configuration."""

    diff_threshold: int = Field(
        default=36,
        ge=0,
        le=255,
        description="Luminance delta above which a sampled pixel counts as moved",
    )
    stride: int = Field(
        default=3,
        ge=1,
        description="Row/column stride of the pixel comparison",
    )
    min_motion_count: int = Field(
        default=160,
        ge=0,
        description="Moved coordinates required for motion to be present",
    )
    density_divisor: float = Field(
        default=4000.0,
        gt=0,
        description="Motion count that maps to a density of 1.0",
    )
    downsample_factor: float = Field(
        default=0.125,
        gt=0,
        le=1.0,
        description="Scale applied to the source frame before differencing",
    )
    min_grid_width: int = Field(default=160, ge=1, description="Minimum grid width")
    min_grid_height: int = Field(default=90, ge=1, description="Minimum grid height")


class SmoothingConfig(BaseModel):
    """Orb position/size smoothing configuration."""

    idle_position_rate: float = Field(
        default=0.012,
        gt=0,
        le=1.0,
        description="Rate at which the orb drifts back to center without motion",
    )
    idle_size_rate: float = Field(
        default=0.02,
        gt=0,
        le=1.0,
        description="Rate at which the orb size relaxes without motion",
    )
    motion_size_rate: float = Field(
        default=0.08,
        gt=0,
        le=1.0,
        description="Rate at which the orb size follows motion density",
    )
    motion_size_gain: float = Field(
        default=0.18,
        ge=0,
        description="Size added on top of preferred size at density 1.0",
    )
    default_size: float = Field(default=0.22, gt=0, description="Fallback orb size")
    clamp_min: float = Field(default=0.08, ge=0, le=0.5, description="Lower position bound")
    clamp_max: float = Field(default=0.92, ge=0.5, le=1.0, description="Upper position bound")


class GestureConfig(BaseModel):
    """Stop/swipe recognition configuration."""

    stop_min_motion_count: int = Field(
        default=300,
        ge=0,
        description="Motion count required for a stillness hold",
    )
    stop_max_speed: float = Field(
        default=0.003,
        ge=0,
        description="Centroid speed below which the scene counts as held still",
    )
    stop_hold_ms: float = Field(
        default=900.0,
        gt=0,
        description="Continuous hold time before 'stop' fires (milliseconds)",
    )
    swipe_window_ms: float = Field(
        default=700.0,
        gt=0,
        description="Age limit of centroid history entries (milliseconds)",
    )
    swipe_min_dx: float = Field(
        default=0.08,
        gt=0,
        description="Horizontal displacement required for a swipe",
    )
    swipe_min_samples: int = Field(
        default=3,
        ge=2,
        description="History entries required before a swipe is evaluated",
    )
    intent_cooldown_ms: float = Field(
        default=900.0,
        ge=0,
        description="Suppression window after any accepted intent (milliseconds)",
    )
    nudge: float = Field(default=0.16, ge=0, description="Orb shift applied by a swipe")
    nudge_min: float = Field(default=0.12, ge=0, le=0.5, description="Lower x bound after a swipe")
    nudge_max: float = Field(default=0.88, ge=0.5, le=1.0, description="Upper x bound after a swipe")
    stop_x: float = Field(default=0.5, ge=0, le=1.0, description="Orb x after 'stop'")
    stop_y: float = Field(default=0.45, ge=0, le=1.0, description="Orb y after 'stop'")
    stop_min_size: float = Field(default=0.28, gt=0, description="Minimum orb size after 'stop'")
    pulse_scale: float = Field(default=1.1, gt=0, description="Pulse radius relative to orb size")
    pulse_opacity: float = Field(default=0.06, ge=0, le=1.0, description="Pulse fill opacity")


class LearningConfig(BaseModel):
    """Profile learning configuration."""

    window_ticks: int = Field(
        default=60,
        ge=1,
        description="Accumulated motion ticks per profile fold",
    )
    motion_weight: float = Field(
        default=0.08,
        gt=0,
        le=1.0,
        description="EMA weight for density and speed",
    )
    size_weight: float = Field(
        default=0.06,
        gt=0,
        le=1.0,
        description="EMA weight for preferred size",
    )
    fast_step_base: float = Field(default=0.08, ge=0, description="Base position smoothing rate")
    fast_step_gain: float = Field(default=6.0, ge=0, description="Speed-to-rate gain")
    fast_step_min: float = Field(default=0.04, ge=0, description="Lower bound of the adaptive term")
    fast_step_max: float = Field(default=0.18, ge=0, description="Upper bound of the adaptive term")


class SpeechConfig(BaseModel):
    """Spoken acknowledgment configuration."""

    cooldown_ms: float = Field(
        default=2000.0,
        ge=0,
        description="Minimum time between accepted phrases (milliseconds)",
    )


class PersistenceConfig(BaseModel):
    """Profile persistence configuration."""

    directory: str = Field(
        default="~/.local/share/visimos",
        description="Directory holding the JSON profile blobs",
    )
    namespace: str = Field(
        default="visimos_profile_v4",
        min_length=1,
        description="Fixed key the profile blob is stored under",
    )


class CameraConfig(BaseModel):
    """Camera capture configuration."""

    index: int = Field(default=0, ge=0, description="OpenCV camera index")
    width: int = Field(default=1280, ge=1, description="Requested capture width")
    height: int = Field(default=720, ge=1, description="Requested capture height")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")
    log_every_n_ticks: int = Field(
        default=120,
        ge=1,
        description="Session summary logging interval",
    )


class Settings(BaseModel):
    """
    Main settings class for Visimos.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    motion: MotionConfig = Field(default_factory=MotionConfig)
    smoothing: SmoothingConfig = Field(default_factory=SmoothingConfig)
    gestures: GestureConfig = Field(default_factory=GestureConfig)
    learning: LearningConfig = Field(default_factory=LearningConfig)
    speech: SpeechConfig = Field(default_factory=SpeechConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    camera: CameraConfig = Field(default_factory=CameraConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        config_path = os.environ.get("VISIMOS_CONFIG")

    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path.home() / ".config" / "visimos" / "config.yaml",
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    if env_cam := os.environ.get("VISIMOS_CAMERA_INDEX"):
        config_data.setdefault("camera", {})["index"] = int(env_cam)

    if env_dir := os.environ.get("VISIMOS_PROFILE_DIR"):
        config_data.setdefault("persistence", {})["directory"] = env_dir
    if env_ns := os.environ.get("VISIMOS_PROFILE_NAMESPACE"):
        config_data.setdefault("persistence", {})["namespace"] = env_ns

    if env_cooldown := os.environ.get("VISIMOS_SPEECH_COOLDOWN_MS"):
        config_data.setdefault("speech", {})["cooldown_ms"] = float(env_cooldown)
    if env_window := os.environ.get("VISIMOS_LEARNING_WINDOW"):
        config_data.setdefault("learning", {})["window_ticks"] = int(env_window)

    if env_log := os.environ.get("VISIMOS_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("VISIMOS_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_fmt


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Loaded on import; components fall back to these sections when not given one
settings = load_config()
