"""
Signals Module
==============

Temporal smoothing and learning on top of perception outputs.

    - OrbSmoother: Exponential smoothing of orb position/size
    - ProfileLearner: Windowed EMA folding into the persisted profile
"""

from visimos.signals.orb_smoother import OrbSmoother, approach
from visimos.signals.profile_learner import ProfileLearner, ema

__all__ = ["OrbSmoother", "ProfileLearner", "approach", "ema"]
