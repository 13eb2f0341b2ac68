"""
Gesture Recognizer
==================

Stateful detectors for two motion gestures with a shared debounce.

Detectors:
    Stop:
        motion_count > 300 AND speed < 0.003, held continuously for
        >= 900ms. The hold start resets whenever the condition breaks
        (idle ticks included) and after every firing.
        Effect: orb to (0.5, 0.45), size at least 0.28.

    Swipe:
        Sliding window of mirrored centroid x samples younger than
        700ms. With >= 3 samples and |last.x - first.x| > 0.08, fires
        MOVE_RIGHT (dx > 0) or MOVE_LEFT (dx < 0) and clears the window.
        Effect: orb x +/- 0.16, clamped to [0.12, 0.88].

Debounce:
    Any accepted intent suppresses every further intent for 900ms.
    A suppressed detector still resets (stillness start / history).
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from visimos.config import GestureConfig
from visimos.gestures.cooldown import Cooldown
from visimos.models.gesture import (
    INTENT_PHRASES,
    CentroidHistoryEntry,
    GestureState,
    Intent,
)
from visimos.models.motion import Centroid, MotionSample
from visimos.models.orb import OrbState
from visimos.models.output import GestureEvent, PulseDrawCommand


logger = logging.getLogger(__name__)


class GestureRecognizer:
    """
    Stop/swipe recognizer.

    All timers live on GestureState; the recognizer only holds
    configuration, so the same instance can drive any number of
    sessions.
    """

    def __init__(self, config: Optional[GestureConfig] = None) -> None:
        """
        Initialize gesture recognizer.

        Args:
            config: Gesture configuration (defaults used if None)
        """
        self.config = config or GestureConfig()
        self._intent_cooldown = Cooldown(self.config.intent_cooldown_ms)

        logger.info(
            f"GestureRecognizer initialized: stop_hold={self.config.stop_hold_ms}ms, "
            f"swipe_window={self.config.swipe_window_ms}ms, "
            f"cooldown={self.config.intent_cooldown_ms}ms"
        )

    def step(
        self,
        state: GestureState,
        centroid: Optional[Centroid],
        sample: MotionSample,
        orb: OrbState,
        now_ms: float,
    ) -> Tuple[GestureState, OrbState, Optional[GestureEvent]]:
        """
        Run both detectors for one tick.

        Args:
            state: Recognizer state from the previous tick
            centroid: This tick's centroid, None when idle
            sample: This tick's motion sample
            orb: Smoothed orb state (gesture effects apply on top)
            now_ms: Current time in milliseconds

        Returns:
            Tuple of (updated_state, orb_after_effects, accepted_event)
        """
        history = self._prune(state.history, now_ms)

        if centroid is None:
            # Idle tick: stillness is broken, nothing is appended
            return replace(state, stillness_started_ms=None, history=history), orb, None

        candidates: List[Intent] = []

        stillness, stop_fired = self._check_stop(state.stillness_started_ms, centroid, sample, now_ms)
        if stop_fired:
            candidates.append(Intent.STOP)

        history, swipe = self._check_swipe(history, centroid, now_ms)
        if swipe is not None:
            candidates.append(swipe)

        new_state = replace(state, stillness_started_ms=stillness, history=history)

        for intent in candidates:
            if not self._intent_cooldown.ready(new_state.last_intent_ms, now_ms):
                logger.debug(f"Intent suppressed by cooldown: {intent.value}")
                new_state = replace(new_state, intents_suppressed=new_state.intents_suppressed + 1)
                continue

            orb = self.apply(intent, orb)
            event = GestureEvent(
                intent=intent,
                phrase=INTENT_PHRASES[intent],
                pulse=self.pulse(orb),
                t_ms=now_ms,
            )
            new_state = replace(
                new_state,
                last_intent_ms=now_ms,
                intents_fired=new_state.intents_fired + 1,
            )
            logger.info(f"Intent accepted: {intent.value} -> {orb!r}")
            return new_state, orb, event

        return new_state, orb, None

    def _prune(self, history: Tuple[CentroidHistoryEntry, ...], now_ms: float) -> Tuple[CentroidHistoryEntry, ...]:
        window = self.config.swipe_window_ms
        return tuple(entry for entry in history if now_ms - entry.t_ms < window)

    def _check_stop(
        self,
        started_ms: Optional[float],
        centroid: Centroid,
        sample: MotionSample,
        now_ms: float,
    ) -> Tuple[Optional[float], bool]:
        """Returns (stillness_start_for_next_tick, fired)."""
        cfg = self.config
        still = sample.motion_count > cfg.stop_min_motion_count and centroid.speed < cfg.stop_max_speed

        if not still:
            return None, False
        if started_ms is None:
            return now_ms, False
        if now_ms - started_ms >= cfg.stop_hold_ms:
            return None, True
        return started_ms, False

    def _check_swipe(
        self,
        history: Tuple[CentroidHistoryEntry, ...],
        centroid: Centroid,
        now_ms: float,
    ) -> Tuple[Tuple[CentroidHistoryEntry, ...], Optional[Intent]]:
        """Returns (history_for_next_tick, swipe_intent)."""
        cfg = self.config
        history = self._prune(history + (CentroidHistoryEntry(x=centroid.target_x, t_ms=now_ms),), now_ms)

        if len(history) < cfg.swipe_min_samples:
            return history, None

        dx = history[-1].x - history[0].x
        if abs(dx) <= cfg.swipe_min_dx:
            return history, None

        return (), (Intent.MOVE_RIGHT if dx > 0 else Intent.MOVE_LEFT)

    def apply(self, intent: Intent, orb: OrbState) -> OrbState:
        """Orb effect of an accepted intent."""
        cfg = self.config
        if intent == Intent.STOP:
            return OrbState(x=cfg.stop_x, y=cfg.stop_y, size=max(orb.size, cfg.stop_min_size))
        if intent == Intent.MOVE_LEFT:
            return replace(orb, x=max(cfg.nudge_min, orb.x - cfg.nudge))
        if intent == Intent.MOVE_RIGHT:
            return replace(orb, x=min(cfg.nudge_max, orb.x + cfg.nudge))
        raise ValueError(f"Unknown intent: {intent}")

    def pulse(self, orb: OrbState) -> PulseDrawCommand:
        """Faint ring drawn around the orb when an intent fires."""
        return PulseDrawCommand(
            x=orb.x,
            y=orb.y,
            radius=orb.size * self.config.pulse_scale,
            opacity=self.config.pulse_opacity,
        )
