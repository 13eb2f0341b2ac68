"""
Overlay Renderer
================

OpenCV rendering of the orb and gesture pulses.

This module is PURELY DESCRIPTIVE. Rendering never feeds back into the
tracker. Commands are normalized; pixel geometry is derived from the
canvas size:

    center = (x * width, y * height)
    radius = min(width, height) * size

The orb is drawn as five concentric translucent layers plus an outline
ring at 0.6 radius. A pulse is a faint filled disc that fades over a
few frames.
"""

import logging
from typing import List, Optional, Tuple

import cv2
import numpy as np

from visimos.models.output import OrbDrawCommand, PulseDrawCommand


logger = logging.getLogger(__name__)


# BGR
ORB_FILL = (120, 215, 255)
ORB_RING = (130, 220, 255)
PULSE_FILL = (150, 230, 255)

ORB_LAYERS = 5
LAYER_ALPHA = 0.06
RING_ALPHA = 0.95


def _blend_circle(
    canvas: np.ndarray,
    center: Tuple[int, int],
    radius: int,
    color: Tuple[int, int, int],
    alpha: float,
    thickness: int = -1,
) -> None:
    """Draw a circle onto canvas with the given opacity, in place."""
    if radius <= 0 or alpha <= 0:
        return
    layer = canvas.copy()
    cv2.circle(layer, center, radius, color, thickness, lineType=cv2.LINE_AA)
    cv2.addWeighted(layer, alpha, canvas, 1.0 - alpha, 0.0, dst=canvas)


class OverlayRenderer:
    """
    Render sink drawing onto a BGR canvas.

    Call begin(canvas) once per tick before the session emits its
    commands; the canvas is modified in place.

    Attributes:
        pulse_frames: How many ticks a pulse stays visible
    """

    def __init__(self, pulse_frames: int = 8) -> None:
        self.pulse_frames = pulse_frames
        self._canvas: Optional[np.ndarray] = None
        self._pulses: List[Tuple[PulseDrawCommand, int]] = []
        logger.info(f"OverlayRenderer initialized: pulse_frames={pulse_frames}")

    def begin(self, canvas: np.ndarray) -> None:
        """Target canvas for this tick's commands."""
        self._canvas = canvas

    def _geometry(self, x: float, y: float, size: float) -> Tuple[Tuple[int, int], int]:
        h, w = self._canvas.shape[:2]
        center = (int(round(x * w)), int(round(y * h)))
        return center, int(round(min(w, h) * size))

    def draw_orb(self, command: OrbDrawCommand) -> None:
        if self._canvas is None:
            return

        self._draw_pulses()

        center, radius = self._geometry(command.x, command.y, command.size)
        for i in range(ORB_LAYERS, 0, -1):
            _blend_circle(self._canvas, center, int(radius * i / ORB_LAYERS), ORB_FILL, LAYER_ALPHA * i)

        thickness = max(4, int(self._canvas.shape[1] * 0.01))
        _blend_circle(self._canvas, center, int(radius * 0.6), ORB_RING, RING_ALPHA, thickness)

    def draw_pulse(self, command: PulseDrawCommand) -> None:
        self._pulses.append((command, self.pulse_frames))

    def _draw_pulses(self) -> None:
        remaining = []
        for command, frames_left in self._pulses:
            center, radius = self._geometry(command.x, command.y, command.radius)
            fade = frames_left / self.pulse_frames
            _blend_circle(self._canvas, center, radius, PULSE_FILL, command.opacity * fade)
            if frames_left > 1:
                remaining.append((command, frames_left - 1))
        self._pulses = remaining
