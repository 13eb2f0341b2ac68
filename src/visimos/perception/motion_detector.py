"""
Motion Detector
===============

Strided frame differencing between consecutive luminance grids.

This detector:
    - Compares every `stride`-th row and column of the current grid
      against the previous one
    - Emits (x, y) wherever |current - previous| > diff_threshold
    - Keeps the previous grid exactly one tick behind

State is explicit: step(state, grid) -> (state', sample). The detector
itself only holds configuration.

Edge Cases:
    - First grid: no motion, grid becomes the previous one
    - Empty grid (degenerate frame): no motion, previous grid kept
    - Grid size changed: treated like a first grid
"""

import logging
from dataclasses import replace
from typing import Optional, Tuple

import numpy as np

from visimos.config import MotionConfig
from visimos.models.motion import LuminanceGrid, MotionDetectorState, MotionSample


logger = logging.getLogger(__name__)


class MotionDetector:
    """
    Frame-differencing motion detector.

    Attributes:
        diff_threshold: Luminance delta above which a cell counts as moved
        stride: Row/column sampling stride
        min_motion_count: Count above which motion is present
        density_divisor: Count mapped to a density of 1.0

    Example:
        detector = MotionDetector()
        state = MotionDetectorState()

        for grid in grids:
            state, sample = detector.step(state, grid)
            if sample.has_motion:
                ...
    """

    def __init__(self, config: Optional[MotionConfig] = None) -> None:
        """
        Initialize motion detector.

        Args:
            config: Motion configuration (defaults used if None)
        """
        config = config or MotionConfig()

        self.diff_threshold = config.diff_threshold
        self.stride = config.stride
        self.min_motion_count = config.min_motion_count
        self.density_divisor = config.density_divisor

        logger.info(
            f"MotionDetector initialized: threshold={self.diff_threshold}, "
            f"stride={self.stride}, min_count={self.min_motion_count}"
        )

    def diff(self, current: LuminanceGrid, previous: LuminanceGrid) -> np.ndarray:
        """
        Moved coordinates between two grids of identical size.

        Args:
            current: This tick's grid
            previous: Last tick's grid

        Returns:
            (N, 2) int64 array of (x, y), row-major order
        """
        s = self.stride
        cur = current.values[::s, ::s].astype(np.int16)
        prev = previous.values[::s, ::s].astype(np.int16)

        ys, xs = np.nonzero(np.abs(cur - prev) > self.diff_threshold)
        return np.stack([xs * s, ys * s], axis=1).astype(np.int64)

    def step(
        self,
        state: MotionDetectorState,
        grid: LuminanceGrid,
    ) -> Tuple[MotionDetectorState, MotionSample]:
        """
        Compare a grid against the retained one.

        Args:
            state: Detector state holding the previous grid
            grid: This tick's luminance grid

        Returns:
            Tuple of (updated_state, motion_sample)
        """
        if grid.is_empty:
            logger.debug("Empty grid, keeping previous grid")
            return state, MotionSample.none()

        previous = state.previous
        if previous is None or previous.shape != grid.shape:
            if previous is not None:
                logger.info(
                    f"Grid size changed {previous.width}x{previous.height} -> "
                    f"{grid.width}x{grid.height}, restarting comparison"
                )
            return replace(state, previous=grid), MotionSample.none(grid.width, grid.height)

        coords = self.diff(grid, previous)
        count = int(coords.shape[0])

        sample = MotionSample(
            coords=coords,
            grid_width=grid.width,
            grid_height=grid.height,
            has_motion=count > self.min_motion_count,
            density=min(1.0, count / self.density_divisor),
        )

        new_state = replace(
            state,
            previous=grid,
            frames_compared=state.frames_compared + 1,
        )
        return new_state, sample
