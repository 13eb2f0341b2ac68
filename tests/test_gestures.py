"""
Gesture Tests
=============

Stop/swipe recognition, the intent debounce and the speech cooldown.
"""

import numpy as np
import pytest

from visimos.gestures import Cooldown, GestureRecognizer, SpeechCooldown
from visimos.models import (
    Centroid,
    GestureState,
    Intent,
    MotionSample,
    OrbState,
    Phrase,
    SpeechGate,
)


def _sample(count: int) -> MotionSample:
    return MotionSample(
        coords=np.zeros((count, 2), dtype=np.int64),
        grid_width=160,
        grid_height=90,
        has_motion=count > 160,
        density=min(1.0, count / 4000),
    )


STILL = _sample(400)
MOVING = _sample(200)


def _run(recognizer, steps, state=None, orb=None):
    """Feed (now_ms, centroid, sample) steps; return final state, orb and all events."""
    state = state or GestureState()
    orb = orb or OrbState()
    events = []
    for now_ms, centroid, sample in steps:
        state, orb, event = recognizer.step(state, centroid, sample, orb, now_ms)
        events.append(event)
    return state, orb, events


class TestCooldown:
    """Tests for the elapsed-time gate."""

    def test_first_request_always_ready(self):
        assert Cooldown(900).ready(None, 0.0)

    def test_threshold_is_inclusive(self):
        cooldown = Cooldown(900)
        assert not cooldown.ready(100.0, 999.0)
        assert cooldown.ready(100.0, 1000.0)

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValueError):
            Cooldown(-1)


class TestSpeechCooldown:
    """Tests for the shared speech gate."""

    def test_phrases_within_cooldown_dropped(self):
        """Verify a second phrase inside 2000ms is dropped, not queued."""
        speech = SpeechCooldown(2000)
        gate = SpeechGate()

        gate, first = speech.request(gate, Phrase.OKAY, 0.0)
        gate, second = speech.request(gate, Phrase.UNDERSTOOD, 1999.0)
        gate, third = speech.request(gate, Phrase.LISTENING, 2000.0)

        assert first == Phrase.OKAY
        assert second is None
        assert third == Phrase.LISTENING
        assert gate.phrases_spoken == 2
        assert gate.phrases_dropped == 1
        assert gate.last_spoken_ms == 2000.0


class TestStopGesture:
    """Tests for the stillness hold detector."""

    def test_fires_after_hold(self):
        """Verify stop fires once stillness has held for 900ms."""
        recognizer = GestureRecognizer()
        centroid = Centroid(0.3, 0.6, speed=0.0)

        state, orb, events = _run(recognizer, [
            (0.0, centroid, STILL),
            (500.0, centroid, STILL),
            (899.0, centroid, STILL),
            (900.0, centroid, STILL),
        ], orb=OrbState(0.3, 0.6, 0.2))

        assert events[:3] == [None, None, None]
        event = events[3]
        assert event.intent == Intent.STOP
        assert event.phrase == Phrase.LISTENING
        assert (orb.x, orb.y, orb.size) == (0.5, 0.45, 0.28)
        assert state.stillness_started_ms is None
        assert state.last_intent_ms == 900.0

    def test_stop_keeps_larger_size(self):
        recognizer = GestureRecognizer()
        assert recognizer.apply(Intent.STOP, OrbState(0.2, 0.2, 0.35)).size == 0.35

    def test_idle_tick_breaks_hold(self):
        """Verify a tick without motion restarts the hold."""
        recognizer = GestureRecognizer()
        centroid = Centroid(0.5, 0.5)

        state, _, events = _run(recognizer, [
            (0.0, centroid, STILL),
            (500.0, None, MotionSample.none()),
            (900.0, centroid, STILL),
        ])

        assert events == [None, None, None]
        assert state.stillness_started_ms == 900.0

    def test_fast_or_sparse_motion_breaks_hold(self):
        """Verify speed >= 0.003 or count <= 300 is not stillness."""
        recognizer = GestureRecognizer()

        state, _, events = _run(recognizer, [
            (0.0, Centroid(0.5, 0.5), STILL),
            (400.0, Centroid(0.5, 0.5, speed=0.003), STILL),
            (800.0, Centroid(0.5, 0.5), MOVING),
            (1000.0, Centroid(0.5, 0.5), STILL),
        ])

        assert all(event is None for event in events)
        assert state.stillness_started_ms == 1000.0

    def test_pulse_follows_orb(self):
        """Verify the pulse ring is 1.1x the orb size at 0.06 opacity."""
        recognizer = GestureRecognizer()
        pulse = recognizer.pulse(OrbState(0.5, 0.45, 0.3))

        assert (pulse.x, pulse.y) == (0.5, 0.45)
        assert pulse.radius == pytest.approx(0.33)
        assert pulse.opacity == 0.06


class TestSwipeGesture:
    """Tests for the horizontal swipe detector."""

    def test_swipe_right(self):
        """Verify dx > 0.08 over three samples fires MOVE_RIGHT and clears history."""
        recognizer = GestureRecognizer()

        state, orb, events = _run(recognizer, [
            (0.0, Centroid(0.50, 0.5, speed=0.05), MOVING),
            (50.0, Centroid(0.55, 0.5, speed=0.05), MOVING),
            (100.0, Centroid(0.60, 0.5, speed=0.05), MOVING),
        ])

        assert events[2].intent == Intent.MOVE_RIGHT
        assert events[2].phrase == Phrase.OKAY
        assert orb.x == pytest.approx(0.66)
        assert state.history == ()

    def test_swipe_left_is_bounded(self):
        """Verify MOVE_LEFT never pushes x below 0.12."""
        recognizer = GestureRecognizer()

        _, orb, events = _run(recognizer, [
            (0.0, Centroid(0.60, 0.5, speed=0.05), MOVING),
            (50.0, Centroid(0.55, 0.5, speed=0.05), MOVING),
            (100.0, Centroid(0.50, 0.5, speed=0.05), MOVING),
        ], orb=OrbState(0.2, 0.5))

        assert events[2].intent == Intent.MOVE_LEFT
        assert events[2].phrase == Phrase.UNDERSTOOD
        assert orb.x == 0.12

    def test_two_samples_not_enough(self):
        recognizer = GestureRecognizer()

        state, _, events = _run(recognizer, [
            (0.0, Centroid(0.2, 0.5), MOVING),
            (50.0, Centroid(0.8, 0.5), MOVING),
        ])

        assert events == [None, None]
        assert len(state.history) == 2

    def test_small_displacement_ignored(self):
        recognizer = GestureRecognizer()

        state, _, events = _run(recognizer, [
            (0.0, Centroid(0.50, 0.5), MOVING),
            (50.0, Centroid(0.54, 0.5), MOVING),
            (100.0, Centroid(0.58, 0.5), MOVING),
        ])

        assert events == [None, None, None]
        assert len(state.history) == 3

    def test_old_samples_expire(self):
        """Verify entries 700ms or older are pruned before evaluation."""
        recognizer = GestureRecognizer()

        state, _, events = _run(recognizer, [
            (0.0, Centroid(0.30, 0.5), MOVING),
            (700.0, Centroid(0.50, 0.5), MOVING),
            (750.0, Centroid(0.55, 0.5), MOVING),
        ])

        assert events == [None, None, None]
        assert [entry.x for entry in state.history] == [0.50, 0.55]

    def test_idle_ticks_prune_without_appending(self):
        """Verify idle ticks never add history entries."""
        recognizer = GestureRecognizer()

        state, _, _ = _run(recognizer, [
            (0.0, Centroid(0.5, 0.5), MOVING),
            (100.0, None, MotionSample.none()),
            (800.0, None, MotionSample.none()),
        ])

        assert state.history == ()


class TestIntentDebounce:
    """Tests for the 900ms suppression after an accepted intent."""

    def test_second_intent_suppressed(self):
        """Verify a swipe right after another is dropped and its history cleared."""
        recognizer = GestureRecognizer()

        state, orb, events = _run(recognizer, [
            (0.0, Centroid(0.30, 0.5, speed=0.05), MOVING),
            (50.0, Centroid(0.35, 0.5, speed=0.05), MOVING),
            (100.0, Centroid(0.40, 0.5, speed=0.05), MOVING),
            (200.0, Centroid(0.40, 0.5, speed=0.05), MOVING),
            (250.0, Centroid(0.45, 0.5, speed=0.05), MOVING),
            (300.0, Centroid(0.50, 0.5, speed=0.05), MOVING),
        ])

        assert events[2].intent == Intent.MOVE_RIGHT
        assert events[5] is None
        assert state.intents_fired == 1
        assert state.intents_suppressed == 1
        assert state.history == ()
        assert orb.x == pytest.approx(0.66)

    def test_intent_accepted_after_cooldown(self):
        recognizer = GestureRecognizer()

        state, _, events = _run(recognizer, [
            (0.0, Centroid(0.30, 0.5, speed=0.05), MOVING),
            (50.0, Centroid(0.35, 0.5, speed=0.05), MOVING),
            (100.0, Centroid(0.40, 0.5, speed=0.05), MOVING),
            (1000.0, Centroid(0.60, 0.5, speed=0.05), MOVING),
            (1050.0, Centroid(0.55, 0.5, speed=0.05), MOVING),
            (1100.0, Centroid(0.50, 0.5, speed=0.05), MOVING),
        ])

        assert events[2].intent == Intent.MOVE_RIGHT
        assert events[5].intent == Intent.MOVE_LEFT
        assert state.intents_fired == 2

    def test_suppressed_stop_still_resets_hold(self):
        """Verify a stop dropped by the debounce restarts its hold."""
        recognizer = GestureRecognizer()
        state = GestureState(stillness_started_ms=0.0, last_intent_ms=500.0)

        state, _, event = recognizer.step(state, Centroid(0.5, 0.5), STILL, OrbState(), 900.0)

        assert event is None
        assert state.stillness_started_ms is None
        assert state.intents_suppressed == 1
