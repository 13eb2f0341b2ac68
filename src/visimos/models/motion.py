"""
Motion Models
=============

Data models passed between the luminance sampler, motion detector and
centroid tracker.

These are ephemeral, per-tick values. None of them is persisted.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np


@dataclass(frozen=True, slots=True, eq=False)
class LuminanceGrid:
    """
    Downsampled single-channel luminance image.

    Attributes:
        values: (height, width) uint8 array
        width: Grid width in cells
        height: Grid height in cells
    """

    values: np.ndarray
    width: int
    height: int

    @classmethod
    def empty(cls) -> "LuminanceGrid":
        """Grid produced for zero-sized input."""
        return cls(values=np.zeros((0, 0), dtype=np.uint8), width=0, height=0)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def shape(self) -> tuple:
        return (self.height, self.width)

    def __repr__(self) -> str:
        return f"LuminanceGrid({self.width}x{self.height})"


@dataclass(frozen=True, slots=True, eq=False)
class MotionSample:
    """
    Moved coordinates for one tick.

    Attributes:
        coords: (N, 2) int array of (x, y) grid coordinates, row-major order
        grid_width: Width of the compared grids
        grid_height: Height of the compared grids
        has_motion: Whether the count cleared the motion threshold
        density: Motion fraction, capped at 1
    """

    coords: np.ndarray
    grid_width: int
    grid_height: int
    has_motion: bool
    density: float

    @classmethod
    def none(cls, grid_width: int = 0, grid_height: int = 0) -> "MotionSample":
        """Sample for ticks where nothing can be compared."""
        return cls(
            coords=np.zeros((0, 2), dtype=np.int64),
            grid_width=grid_width,
            grid_height=grid_height,
            has_motion=False,
            density=0.0,
        )

    @property
    def motion_count(self) -> int:
        return int(self.coords.shape[0])

    def __repr__(self) -> str:
        return (
            f"MotionSample(count={self.motion_count}, "
            f"density={self.density:.3f}, motion={self.has_motion})"
        )


@dataclass(frozen=True, slots=True)
class Centroid:
    """
    Normalized, mirrored focal point of a motion tick.

    Attributes:
        target_x: 1 - mean_x / width (mirrored for front-facing capture)
        target_y: mean_y / height
        speed: Distance to the previous centroid of this motion streak
    """

    target_x: float
    target_y: float
    speed: float = 0.0

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "target_x": round(self.target_x, 4),
            "target_y": round(self.target_y, 4),
            "speed": round(self.speed, 5),
        }


@dataclass(frozen=True, slots=True, eq=False)
class MotionDetectorState:
    """
    Grid retained exactly one tick behind the current one.

    Attributes:
        previous: Last valid luminance grid, None before the first frame
        frames_compared: Ticks on which a comparison actually ran
    """

    previous: Optional[LuminanceGrid] = None
    frames_compared: int = field(default=0)
