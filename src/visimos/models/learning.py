"""
Learning Models
===============

Accumulation window and fold result of the profile learner.
"""

from dataclasses import dataclass

from visimos.models.profile import Profile


@dataclass(frozen=True, slots=True)
class AccumulatorWindow:
    """
    Running sums for one accumulation window.

    Attributes:
        density_sum: Sum of observed densities
        speed_sum: Sum of observed centroid speeds
        ticks: Observations in this window
    """

    density_sum: float = 0.0
    speed_sum: float = 0.0
    ticks: int = 0

    @property
    def mean_density(self) -> float:
        return self.density_sum / self.ticks if self.ticks else 0.0

    @property
    def mean_speed(self) -> float:
        return self.speed_sum / max(1, self.ticks)


@dataclass(frozen=True, slots=True)
class FoldResult:
    """
    Outcome of a fold check.

    should_save is the explicit persistence trigger; the caller decides
    when and how to perform the save.
    """

    window: AccumulatorWindow
    profile: Profile
    fast_step: float
    folded: bool = False

    @property
    def should_save(self) -> bool:
        return self.folded
