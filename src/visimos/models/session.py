"""
Session State
=============

Explicit aggregate of all per-session mutable state.

The session threads one SessionState into each tick and receives the
next one back. Nothing is kept in module-level globals, so a tick is a
deterministic function of (state, frame, now_ms).
"""

from dataclasses import dataclass, field
from typing import Optional

from visimos.models.gesture import GestureState, SpeechGate
from visimos.models.learning import AccumulatorWindow
from visimos.models.motion import Centroid, MotionDetectorState
from visimos.models.orb import OrbState
from visimos.models.profile import Profile


@dataclass(frozen=True, slots=True)
class SessionState:
    """
    Per-session state.

    Attributes:
        profile: Profile in its current (possibly unsaved) form
        orb: Smoothed orb state
        fast_step: Adaptive position smoothing rate
        detector: Motion detector state (previous grid)
        previous_centroid: Centroid of the previous motion tick
        gestures: Gesture recognizer state
        speech: Speech cooldown state
        window: Profile learner accumulation window
        tick: Ticks completed so far
    """

    profile: Profile
    orb: OrbState
    fast_step: float
    detector: MotionDetectorState = field(default_factory=MotionDetectorState)
    previous_centroid: Optional[Centroid] = None
    gestures: GestureState = field(default_factory=GestureState)
    speech: SpeechGate = field(default_factory=SpeechGate)
    window: AccumulatorWindow = field(default_factory=AccumulatorWindow)
    tick: int = 0
