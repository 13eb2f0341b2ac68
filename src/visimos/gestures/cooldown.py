"""
Cooldown Gates
==============

"Ignore if too soon" gates for intents and spoken acknowledgments.

A request is accepted when no request was accepted before, or when at
least `threshold_ms` have elapsed since the last accepted one. Rejected
requests are dropped, never queued or delayed.
"""

import logging
from dataclasses import replace
from typing import Optional, Tuple

from visimos.models.gesture import Phrase, SpeechGate


logger = logging.getLogger(__name__)


class Cooldown:
    """Elapsed-time gate."""

    def __init__(self, threshold_ms: float) -> None:
        if threshold_ms < 0:
            raise ValueError(f"threshold_ms must be >= 0, got {threshold_ms}")
        self.threshold_ms = threshold_ms

    def ready(self, last_accepted_ms: Optional[float], now_ms: float) -> bool:
        """Whether a request at now_ms would be accepted."""
        if last_accepted_ms is None:
            return True
        return now_ms - last_accepted_ms >= self.threshold_ms


class SpeechCooldown:
    """
    Shared cooldown for every spoken acknowledgment.

    Example:
        gate = SpeechGate()
        speech = SpeechCooldown(2000)
        gate, phrase = speech.request(gate, Phrase.OKAY, now_ms)
        if phrase is not None:
            sink.speak(phrase.value)
    """

    def __init__(self, cooldown_ms: float = 2000.0) -> None:
        self._cooldown = Cooldown(cooldown_ms)
        logger.info(f"SpeechCooldown initialized: cooldown={cooldown_ms}ms")

    @property
    def cooldown_ms(self) -> float:
        return self._cooldown.threshold_ms

    def request(
        self,
        gate: SpeechGate,
        phrase: Phrase,
        now_ms: float,
    ) -> Tuple[SpeechGate, Optional[Phrase]]:
        """
        Ask to speak a phrase.

        Returns:
            Tuple of (updated_gate, phrase or None if dropped)
        """
        if not self._cooldown.ready(gate.last_spoken_ms, now_ms):
            logger.debug(f"Speech dropped by cooldown: {phrase.value!r}")
            return replace(gate, phrases_dropped=gate.phrases_dropped + 1), None

        return replace(
            gate,
            last_spoken_ms=now_ms,
            phrases_spoken=gate.phrases_spoken + 1,
        ), phrase
