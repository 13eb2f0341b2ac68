"""
Gesture Models
==============

Intents, acknowledgment phrases and the explicit recognizer state.

Rules:
    - Intents are a fixed, closed set
    - Phrases are fixed strings, never parameterized
    - Every timer lives on GestureState or SpeechGate, never in globals
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Intent(str, Enum):
    """
    Discrete intents produced by the gesture recognizer.

    Attributes:
        STOP: Stillness held long enough to request attention
        MOVE_LEFT: Horizontal swipe toward decreasing x
        MOVE_RIGHT: Horizontal swipe toward increasing x
    """

    STOP = "stop"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"


class Phrase(str, Enum):
    """Spoken acknowledgments."""

    WELCOME_BACK = "Welcome back."
    LISTENING = "I am listening."
    UNDERSTOOD = "Understood."
    OKAY = "Okay."


INTENT_PHRASES = {
    Intent.STOP: Phrase.LISTENING,
    Intent.MOVE_LEFT: Phrase.UNDERSTOOD,
    Intent.MOVE_RIGHT: Phrase.OKAY,
}


@dataclass(frozen=True, slots=True)
class CentroidHistoryEntry:
    """Mirrored centroid x observed at t_ms."""

    x: float
    t_ms: float


@dataclass(frozen=True, slots=True)
class GestureState:
    """
    Recognizer state threaded through every tick.

    Attributes:
        stillness_started_ms: When the current stillness hold began
        history: Recent centroid x samples, oldest first
        last_intent_ms: When the last intent was accepted
        intents_fired: Accepted intents this session
        intents_suppressed: Intents dropped by the cooldown
    """

    stillness_started_ms: Optional[float] = None
    history: Tuple[CentroidHistoryEntry, ...] = ()
    last_intent_ms: Optional[float] = None
    intents_fired: int = 0
    intents_suppressed: int = 0


@dataclass(frozen=True, slots=True)
class SpeechGate:
    """
    Shared speech cooldown.

    Attributes:
        last_spoken_ms: When the last phrase was accepted
        phrases_spoken: Accepted phrases this session
        phrases_dropped: Phrases dropped by the cooldown
    """

    last_spoken_ms: Optional[float] = None
    phrases_spoken: int = 0
    phrases_dropped: int = 0
