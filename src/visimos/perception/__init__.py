"""
Perception Module
=================

Turns raw frames into motion measurements.

Components:
    - sample_luminance: Frame -> LuminanceGrid
    - MotionDetector: (previous grid, grid) -> MotionSample
    - CentroidTracker: MotionSample -> Centroid

No shapes, identities or multiple targets: only aggregate motion.
"""

from visimos.perception.centroid import CentroidTracker
from visimos.perception.luminance import (
    FrameDecodeError,
    grid_size,
    sample_luminance,
    to_luminance,
)
from visimos.perception.motion_detector import MotionDetector

__all__ = [
    "sample_luminance",
    "grid_size",
    "to_luminance",
    "FrameDecodeError",
    "MotionDetector",
    "CentroidTracker",
]
