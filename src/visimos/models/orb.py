"""
Orb State Models
================

Transient state of the focal orb for one session.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class OrbState:
    """
    Normalized screen-space position and size of the orb.

    Produced by OrbSmoother and GestureRecognizer, consumed by the
    render sink. Clamping is applied every tick after smoothing.

    Attributes:
        x: Horizontal position [0, 1]
        y: Vertical position [0, 1]
        size: Radius factor relative to min(width, height)
    """

    x: float = 0.5
    y: float = 0.5
    size: float = 0.22

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.size <= 0:
            raise ValueError("size must be positive")

    def clamped(self, lower: float, upper: float) -> "OrbState":
        """Return a copy with x and y clamped to [lower, upper]."""
        return replace(
            self,
            x=max(lower, min(upper, self.x)),
            y=max(lower, min(upper, self.y)),
        )

    def __repr__(self) -> str:
        return f"OrbState(x={self.x:.3f}, y={self.y:.3f}, size={self.size:.3f})"
