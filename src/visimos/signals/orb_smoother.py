"""
Orb State Smoother
==================

Exponentially smooths the orb position and size toward the current
target.

Two regimes:
    Motion present:
        position -> centroid          at fast_step (adaptive, from profile)
        size     -> preferred + density * motion_size_gain  at 0.08
    Idle:
        position -> (0.5, 0.5)        at 0.012
        size     -> preferred         at 0.02

Formula: value += (target - value) * rate
Afterwards x and y are clamped to [clamp_min, clamp_max].

The idle and motion size rates differ on purpose and are kept as two
separate constants.
"""

import logging
from typing import Optional

from visimos.config import SmoothingConfig
from visimos.models.motion import Centroid, MotionSample
from visimos.models.orb import OrbState
from visimos.models.profile import Profile


logger = logging.getLogger(__name__)


def approach(value: float, target: float, rate: float) -> float:
    """First-order exponential step toward target."""
    return value + (target - value) * rate


class OrbSmoother:
    """
    Pure smoother for OrbState.

    Attributes:
        idle_position_rate: Drift-to-center rate without motion
        idle_size_rate: Size relaxation rate without motion
        motion_size_rate: Size tracking rate with motion
        motion_size_gain: Extra size at density 1.0
        clamp_min: Lower position bound
        clamp_max: Upper position bound
    """

    def __init__(self, config: Optional[SmoothingConfig] = None) -> None:
        """
        Initialize orb smoother.

        Args:
            config: Smoothing configuration (defaults used if None)

        Raises:
            ValueError: If the clamp bounds are inverted
        """
        config = config or SmoothingConfig()
        if config.clamp_min >= config.clamp_max:
            raise ValueError(
                f"clamp_min must be < clamp_max, got {config.clamp_min} >= {config.clamp_max}"
            )

        self.idle_position_rate = config.idle_position_rate
        self.idle_size_rate = config.idle_size_rate
        self.motion_size_rate = config.motion_size_rate
        self.motion_size_gain = config.motion_size_gain
        self.default_size = config.default_size
        self.clamp_min = config.clamp_min
        self.clamp_max = config.clamp_max

        logger.info(
            f"OrbSmoother initialized: idle_rate={self.idle_position_rate}, "
            f"idle_size_rate={self.idle_size_rate}, motion_size_rate={self.motion_size_rate}"
        )

    def step(
        self,
        orb: OrbState,
        centroid: Optional[Centroid],
        sample: MotionSample,
        profile: Profile,
        fast_step: float,
    ) -> OrbState:
        """
        Advance the orb by one tick.

        Args:
            orb: Current orb state
            centroid: This tick's centroid, None when idle
            sample: This tick's motion sample (for density)
            profile: Current profile (for preferred size)
            fast_step: Adaptive position rate for the motion regime

        Returns:
            Smoothed and clamped OrbState
        """
        preferred = profile.preferred_size or self.default_size

        if centroid is not None:
            target_size = preferred + sample.density * self.motion_size_gain
            smoothed = OrbState(
                x=approach(orb.x, centroid.target_x, fast_step),
                y=approach(orb.y, centroid.target_y, fast_step),
                size=approach(orb.size, target_size, self.motion_size_rate),
            )
        else:
            smoothed = OrbState(
                x=approach(orb.x, 0.5, self.idle_position_rate),
                y=approach(orb.y, 0.5, self.idle_position_rate),
                size=approach(orb.size, preferred, self.idle_size_rate),
            )

        return self.clamp(smoothed)

    def clamp(self, orb: OrbState) -> OrbState:
        """Clamp position to the configured bounds."""
        return orb.clamped(self.clamp_min, self.clamp_max)
