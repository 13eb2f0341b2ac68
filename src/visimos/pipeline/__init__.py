"""
Pipeline Module
===============

Per-tick orchestration.

    - TickGraph: LangGraph workflow wiring perception, smoothing,
      gestures and learning for one tick
    - VisimosSession: Session lifecycle, persistence triggers and
      collaborator output
"""

from visimos.pipeline.graph import TickGraph, TickGraphState
from visimos.pipeline.session import (
    ReentrantTickError,
    SessionStart,
    VisimosSession,
    monotonic_ms,
)

__all__ = [
    "TickGraph",
    "TickGraphState",
    "VisimosSession",
    "SessionStart",
    "ReentrantTickError",
    "monotonic_ms",
]
