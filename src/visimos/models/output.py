"""
Output Models
=============

Commands emitted to the render and speech collaborators, and the
per-tick output contract of a session.

All geometry is normalized; the render sink scales it to pixels.
"""

from dataclasses import dataclass
from typing import Optional

from visimos.models.gesture import Intent, Phrase
from visimos.models.motion import Centroid


@dataclass(frozen=True, slots=True)
class OrbDrawCommand:
    """Draw the orb at a normalized position with a normalized radius factor."""

    x: float
    y: float
    size: float


@dataclass(frozen=True, slots=True)
class PulseDrawCommand:
    """
    Transient faint ring drawn when a gesture fires.

    Attributes:
        x: Normalized center x
        y: Normalized center y
        radius: Radius factor relative to min(width, height)
        opacity: Fill opacity [0, 1]
    """

    x: float
    y: float
    radius: float
    opacity: float


@dataclass(frozen=True, slots=True)
class GestureEvent:
    """An accepted intent and the effects it requests."""

    intent: Intent
    phrase: Phrase
    pulse: PulseDrawCommand
    t_ms: float


@dataclass(frozen=True, slots=True)
class TickOutput:
    """
    Complete output of one tick.

    Attributes:
        tick: 1-based tick index within the session
        orb: Orb draw command (always present)
        pulse: Pulse draw command when a gesture fired
        phrase: Phrase that passed the speech cooldown
        intent: Accepted intent, if any
        motion_count: Moved coordinates this tick
        centroid: Centroid when motion was present
        profile_saved: Whether a profile fold was persisted this tick
        degenerate_frame: Whether the frame could not be sampled
    """

    tick: int
    orb: OrbDrawCommand
    pulse: Optional[PulseDrawCommand] = None
    phrase: Optional[Phrase] = None
    intent: Optional[Intent] = None
    motion_count: int = 0
    centroid: Optional[Centroid] = None
    profile_saved: bool = False
    degenerate_frame: bool = False

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "tick": self.tick,
            "orb": {"x": round(self.orb.x, 4), "y": round(self.orb.y, 4), "size": round(self.orb.size, 4)},
            "intent": self.intent.value if self.intent else None,
            "phrase": self.phrase.value if self.phrase else None,
            "motion_count": self.motion_count,
            "centroid": self.centroid.to_dict() if self.centroid else None,
            "profile_saved": self.profile_saved,
        }
