"""
Luminance Sampler
=================

Downsamples a raw RGB(A) frame to a small luminance grid.

Design Rules:
    - This is the ONLY place in the codebase that touches raw pixels
    - Grid size is max(min, floor(source * factor)) on each axis
    - Luminance = 0.299 R + 0.587 G + 0.114 B, truncated to uint8
    - Zero-sized input yields an empty grid; malformed input raises
"""

import logging
import math
from typing import Optional, Tuple

import cv2
import numpy as np

from visimos.config import MotionConfig
from visimos.models.motion import LuminanceGrid
from visimos.stream.frame import Frame


logger = logging.getLogger(__name__)


LUMA_WEIGHTS = (0.299, 0.587, 0.114)


class FrameDecodeError(Exception):
    """Raised when a frame buffer cannot be interpreted."""
    pass


def grid_size(
    width: int,
    height: int,
    factor: float = 0.125,
    min_width: int = 160,
    min_height: int = 90,
) -> Tuple[int, int]:
    """
    Compute the sampled grid dimensions for a source frame.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        factor: Downsample factor (1/8 by default)
        min_width: Minimum grid width
        min_height: Minimum grid height

    Returns:
        (grid_width, grid_height)
    """
    return (
        max(min_width, int(math.floor(width * factor))),
        max(min_height, int(math.floor(height * factor))),
    )


def to_luminance(rgb: np.ndarray) -> np.ndarray:
    """Weighted RGB sum truncated to uint8. Accepts (H, W, 3+) arrays."""
    r = rgb[..., 0].astype(np.float64)
    g = rgb[..., 1].astype(np.float64)
    b = rgb[..., 2].astype(np.float64)
    luma = LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b
    return luma.astype(np.uint8)


def _validate(frame: Frame) -> None:
    pixels = frame.pixels
    if not isinstance(pixels, np.ndarray):
        raise FrameDecodeError(
            f"Frame {frame.frame_id}: pixel buffer is {type(pixels).__name__}, expected ndarray"
        )
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise FrameDecodeError(
            f"Invalid pixel shape for frame {frame.frame_id}: {pixels.shape}"
        )
    if pixels.dtype != np.uint8:
        raise FrameDecodeError(
            f"Invalid dtype for frame {frame.frame_id}: {pixels.dtype}"
        )
    if pixels.shape[:2] != (frame.height, frame.width):
        raise FrameDecodeError(
            f"Frame {frame.frame_id}: declared {frame.width}x{frame.height}, "
            f"buffer is {pixels.shape[1]}x{pixels.shape[0]}"
        )


def sample_luminance(frame: Frame, config: Optional[MotionConfig] = None) -> LuminanceGrid:
    """
    Downsample a frame and convert it to a luminance grid.

    Args:
        frame: RGB(A) frame
        config: Motion configuration (defaults used if None)

    Returns:
        LuminanceGrid, empty when the frame has no pixels

    Raises:
        FrameDecodeError: If the buffer is malformed
    """
    config = config or MotionConfig()

    if frame.width <= 0 or frame.height <= 0:
        return LuminanceGrid.empty()

    _validate(frame)

    small_w, small_h = grid_size(
        frame.width,
        frame.height,
        factor=config.downsample_factor,
        min_width=config.min_grid_width,
        min_height=config.min_grid_height,
    )

    rgb = np.ascontiguousarray(frame.pixels[..., :3])
    if (small_w, small_h) != (frame.width, frame.height):
        rgb = cv2.resize(rgb, (small_w, small_h), interpolation=cv2.INTER_AREA)

    return LuminanceGrid(values=to_luminance(rgb), width=small_w, height=small_h)
