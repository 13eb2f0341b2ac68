"""
Profile Learner
===============

Online learning loop that folds per-tick observations into the
long-lived Profile.

This learner:
    - Accumulates density and speed on every motion tick
    - After `window_ticks` observations, folds the window averages into
      the profile via EMA and clears the window
    - Pulls preferred_size toward the current smoothed orb size
    - Derives the adaptive position rate (fast step) from avg_speed
    - Returns an explicit save trigger instead of saving itself

Formulas:
    avg_density    = avg_density * 0.92 + observed_density * 0.08
    avg_speed      = avg_speed * 0.92 + observed_speed * 0.08
    preferred_size = preferred_size * 0.94 + orb_size * 0.06
    fast_step      = 0.08 + clamp(avg_speed * 6, 0.04, 0.18)
"""

import logging
from dataclasses import replace
from typing import Optional

from visimos.config import LearningConfig
from visimos.models.learning import AccumulatorWindow, FoldResult
from visimos.models.profile import Profile


logger = logging.getLogger(__name__)


def ema(old: float, observed: float, weight: float) -> float:
    """new = old * (1 - weight) + observed * weight"""
    return old * (1.0 - weight) + observed * weight


class ProfileLearner:
    """
    EMA-based profile learner.

    The EMA fields of a Profile are written here and nowhere else.

    Example:
        learner = ProfileLearner()
        window = AccumulatorWindow()

        window = learner.observe(window, density=0.4, speed=0.01)
        result = learner.maybe_fold(window, profile, orb_size=0.24)
        if result.should_save:
            store.save(result.profile)
    """

    def __init__(self, config: Optional[LearningConfig] = None) -> None:
        """
        Initialize profile learner.

        Args:
            config: Learning configuration (defaults used if None)

        Raises:
            ValueError: If the fast step bounds are inverted
        """
        config = config or LearningConfig()
        if config.fast_step_min > config.fast_step_max:
            raise ValueError(
                f"fast_step_min must be <= fast_step_max, "
                f"got {config.fast_step_min} > {config.fast_step_max}"
            )

        self.window_ticks = config.window_ticks
        self.motion_weight = config.motion_weight
        self.size_weight = config.size_weight
        self.fast_step_base = config.fast_step_base
        self.fast_step_gain = config.fast_step_gain
        self.fast_step_min = config.fast_step_min
        self.fast_step_max = config.fast_step_max
        self._folds = 0

        logger.info(
            f"ProfileLearner initialized: window={self.window_ticks} ticks, "
            f"weights={self.motion_weight}/{self.size_weight}"
        )

    def fast_step(self, profile: Profile) -> float:
        """Adaptive position smoothing rate for the motion regime."""
        adaptive = profile.avg_speed * self.fast_step_gain
        return self.fast_step_base + max(self.fast_step_min, min(self.fast_step_max, adaptive))

    def observe(self, window: AccumulatorWindow, density: float, speed: float) -> AccumulatorWindow:
        """Add one tick's observation to the window."""
        return AccumulatorWindow(
            density_sum=window.density_sum + min(1.0, density),
            speed_sum=window.speed_sum + speed,
            ticks=window.ticks + 1,
        )

    def fold(self, window: AccumulatorWindow, profile: Profile, orb_size: float) -> Profile:
        """
        Fold window averages into the profile.

        Args:
            window: Accumulated observations (must be non-empty)
            profile: Profile before the fold
            orb_size: Current smoothed orb size

        Returns:
            Updated profile
        """
        if window.ticks == 0:
            return profile

        observed_density = window.mean_density
        observed_speed = window.mean_speed

        return profile.model_copy(update={
            "avg_density": min(1.0, ema(profile.avg_density, observed_density, self.motion_weight)),
            "avg_speed": ema(profile.avg_speed, observed_speed, self.motion_weight),
            "preferred_size": ema(profile.preferred_size, orb_size, self.size_weight),
        })

    def maybe_fold(self, window: AccumulatorWindow, profile: Profile, orb_size: float) -> FoldResult:
        """
        Fold once the window is full.

        Returns:
            FoldResult with should_save set when a fold happened. The
            window is cleared on fold and returned unchanged otherwise.
        """
        if window.ticks < self.window_ticks:
            return FoldResult(
                window=window,
                profile=profile,
                fast_step=self.fast_step(profile),
            )

        folded = self.fold(window, profile, orb_size)
        self._folds += 1
        fast_step = self.fast_step(folded)

        logger.info(
            f"Profile fold #{self._folds}: "
            f"density={folded.avg_density:.4f}, speed={folded.avg_speed:.5f}, "
            f"size={folded.preferred_size:.4f}, fast_step={fast_step:.3f}"
        )

        return FoldResult(
            window=replace(window, density_sum=0.0, speed_sum=0.0, ticks=0),
            profile=folded,
            fast_step=fast_step,
            folded=True,
        )

    @property
    def fold_count(self) -> int:
        """Folds performed by this learner."""
        return self._folds
