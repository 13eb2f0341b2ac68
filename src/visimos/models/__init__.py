"""
Data Models
===========

Data models for Visimos.

This module re-exports all data models for convenient access.

Models:
    Persisted:
        - Profile: Long-lived behavioral statistics

    Per tick:
        - LuminanceGrid, MotionSample, Centroid
        - OrbDrawCommand, PulseDrawCommand, GestureEvent, TickOutput

    Per session:
        - OrbState, GestureState, SpeechGate, AccumulatorWindow
        - MotionDetectorState, SessionState

    Enums:
        - Intent, Phrase, ErrorKind
"""

from visimos.models.diagnostics import ErrorKind
from visimos.models.gesture import (
    CentroidHistoryEntry,
    GestureState,
    Intent,
    Phrase,
    SpeechGate,
)
from visimos.models.learning import AccumulatorWindow, FoldResult
from visimos.models.motion import (
    Centroid,
    LuminanceGrid,
    MotionDetectorState,
    MotionSample,
)
from visimos.models.orb import OrbState
from visimos.models.output import (
    GestureEvent,
    OrbDrawCommand,
    PulseDrawCommand,
    TickOutput,
)
from visimos.models.profile import Profile
from visimos.models.session import SessionState

__all__ = [
    # Persisted
    "Profile",
    # Per tick
    "LuminanceGrid",
    "MotionSample",
    "Centroid",
    "OrbDrawCommand",
    "PulseDrawCommand",
    "GestureEvent",
    "TickOutput",
    # Per session
    "OrbState",
    "CentroidHistoryEntry",
    "GestureState",
    "SpeechGate",
    "AccumulatorWindow",
    "FoldResult",
    "MotionDetectorState",
    "SessionState",
    # Enums
    "Intent",
    "Phrase",
    "ErrorKind",
]
