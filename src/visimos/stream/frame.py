"""
Frame Data Model
================

Internal frame representation for the tick pipeline.

Design Rules:
    - This is the ONLY frame format passed to the core
    - Pixels are RGB or RGBA, uint8, row-major (height, width, channels)
    - The declared width/height are validated against the buffer by the
      luminance sampler, not here, so malformed frames can still be
      reported as degenerate instead of raising at construction
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True, slots=True, eq=False)
class Frame:
    """
    One captured video frame.

    Attributes:
        pixels: (height, width, 3|4) uint8 RGB(A) buffer
        width: Declared frame width in pixels
        height: Declared frame height in pixels
        frame_id: Monotonically increasing counter from the source
        timestamp_ms: Capture time in milliseconds, if the source knows it
    """

    pixels: np.ndarray
    width: int
    height: int
    frame_id: int = 0
    timestamp_ms: Optional[float] = None

    @classmethod
    def from_rgb(
        cls,
        pixels: np.ndarray,
        frame_id: int = 0,
        timestamp_ms: Optional[float] = None,
    ) -> "Frame":
        """Build a frame whose dimensions are taken from the buffer."""
        height, width = pixels.shape[:2] if pixels.ndim >= 2 else (0, 0)
        return cls(
            pixels=pixels,
            width=int(width),
            height=int(height),
            frame_id=frame_id,
            timestamp_ms=timestamp_ms,
        )

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixel buffer."""
        return (
            f"Frame(frame_id={self.frame_id}, "
            f"size={self.width}x{self.height})"
        )
