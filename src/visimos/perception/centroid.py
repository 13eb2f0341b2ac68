"""
Centroid Tracker
================

Reduces moved coordinates to a normalized focal point and an
instantaneous speed.

The x axis is mirrored (1 - nx) so that motion toward the viewer's
right moves the orb right on a front-facing capture.
"""

import logging
import math
from typing import Optional, Tuple

from visimos.models.motion import Centroid, MotionSample


logger = logging.getLogger(__name__)


class CentroidTracker:
    """
    Mean-coordinate tracker.

    Speed is the distance between consecutive centroids of one motion
    streak. A tick without motion ends the streak.
    """

    def __init__(self, mirror_x: bool = True) -> None:
        self.mirror_x = mirror_x
        logger.info(f"CentroidTracker initialized: mirror_x={mirror_x}")

    def step(
        self,
        previous: Optional[Centroid],
        sample: MotionSample,
    ) -> Tuple[Optional[Centroid], Optional[Centroid]]:
        """
        Compute this tick's centroid.

        Args:
            previous: Centroid of the previous motion tick, if any
            sample: This tick's motion sample

        Returns:
            Tuple of (previous_for_next_tick, centroid). Both are None
            when the sample has no motion.
        """
        if not sample.has_motion or sample.motion_count == 0:
            return None, None

        mean_x, mean_y = sample.coords.mean(axis=0)
        nx = float(mean_x) / sample.grid_width
        ny = float(mean_y) / sample.grid_height

        target_x = 1.0 - nx if self.mirror_x else nx
        target_y = ny

        speed = 0.0
        if previous is not None:
            speed = math.hypot(target_x - previous.target_x, target_y - previous.target_y)

        centroid = Centroid(target_x=target_x, target_y=target_y, speed=speed)
        return centroid, centroid
