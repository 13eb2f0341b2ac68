"""
Render and Speech Sinks
=======================

Output boundaries of the core.

    - RenderSink: receives one orb draw command per tick and a pulse
      draw command whenever a gesture fires
    - SpeechSink: receives accepted acknowledgment phrases

Voice selection and audio output belong to the sink, not the core.
"""

import logging
from typing import List, Protocol

from visimos.models.output import OrbDrawCommand, PulseDrawCommand


logger = logging.getLogger(__name__)


class RenderSink(Protocol):
    """Protocol for orb/pulse renderers."""

    def draw_orb(self, command: OrbDrawCommand) -> None:
        ...

    def draw_pulse(self, command: PulseDrawCommand) -> None:
        ...


class SpeechSink(Protocol):
    """Protocol for speech output."""

    def speak(self, phrase: str) -> None:
        ...


class LoggingSpeechSink:
    """Logs phrases instead of speaking them."""

    def __init__(self) -> None:
        self.spoken: List[str] = []

    def speak(self, phrase: str) -> None:
        self.spoken.append(phrase)
        logger.info(f"Speak: {phrase!r}")


class RecordingRenderSink:
    """Keeps every draw command; used for headless runs and tests."""

    def __init__(self) -> None:
        self.orbs: List[OrbDrawCommand] = []
        self.pulses: List[PulseDrawCommand] = []

    def draw_orb(self, command: OrbDrawCommand) -> None:
        self.orbs.append(command)

    def draw_pulse(self, command: PulseDrawCommand) -> None:
        self.pulses.append(command)
