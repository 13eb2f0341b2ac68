"""
Session Tests
=============

End-to-end behavior of VisimosSession over synthetic frames.
"""

import json

import numpy as np
import pytest

from tests.conftest import blank_pixels, block_pixels, make_frame
from visimos.models import ErrorKind, Intent, Phrase
from visimos.persistence import DEFAULT_NAMESPACE
from visimos.stream.frame import Frame


def _seed(backend, **record):
    base = {"visits": 2, "avgDensity": 0.3, "avgSpeed": 0.01, "preferredSize": 0.26}
    base.update(record)
    backend.write(DEFAULT_NAMESPACE, json.dumps(base))
    backend.write_count = 0


class TestSessionStart:
    """Tests for profile load and greeting."""

    def test_first_visit(self, session, backend, speech_sink):
        """Verify a first visit counts the visit, saves it and stays silent."""
        start = session.start(now_ms=0.0)

        assert not start.returning
        assert start.phrase is None
        assert start.saved
        assert start.profile.visit_count == 1
        assert backend.write_count == 1
        assert speech_sink.spoken == []
        assert session.state.fast_step == pytest.approx(0.2)
        assert session.orb.size == pytest.approx(0.22)

    def test_returning_visit(self, session, backend, speech_sink):
        """Verify a stored profile is greeted and seeds the orb."""
        _seed(backend)

        start = session.start(now_ms=0.0)

        assert start.returning
        assert start.phrase == Phrase.WELCOME_BACK
        assert start.profile.visit_count == 3
        assert speech_sink.spoken == ["Welcome back."]
        assert (session.orb.x, session.orb.y) == (0.5, 0.5)
        assert session.orb.size == pytest.approx(0.26)
        assert session.state.fast_step == pytest.approx(0.08 + 0.06)

    def test_corrupt_profile_starts_fresh(self, session, backend, diagnostics, speech_sink):
        backend.write(DEFAULT_NAMESPACE, "{{{")

        start = session.start(now_ms=0.0)

        assert not start.returning
        assert start.profile.visit_count == 1
        assert speech_sink.spoken == []
        assert diagnostics.count(ErrorKind.PERSISTENCE_UNAVAILABLE) == 1

    def test_save_failure_does_not_stop_session(self, settings, diagnostics):
        """Verify an unwritable store is reported and the session runs on."""
        from visimos.persistence import ProfileStore
        from visimos.pipeline import VisimosSession

        class ReadOnlyBackend:
            def read(self, key):
                return None

            def write(self, key, blob):
                raise PermissionError("read-only")

        session = VisimosSession(
            ProfileStore(ReadOnlyBackend(), diagnostics=diagnostics),
            diagnostics=diagnostics,
            settings=settings,
        )
        start = session.start(now_ms=0.0)
        output = session.tick(make_frame(blank_pixels()), now_ms=16.0)

        assert not start.saved
        assert start.profile.visit_count == 1
        assert output.tick == 1
        assert diagnostics.count(ErrorKind.PERSISTENCE_UNAVAILABLE) == 1

    def test_start_twice_rejected(self, session):
        session.start(now_ms=0.0)
        with pytest.raises(RuntimeError):
            session.start(now_ms=1.0)


class TestSessionTicks:
    """Tests for the per-tick pipeline."""

    def test_tick_before_start_rejected(self, session):
        with pytest.raises(RuntimeError):
            session.tick(make_frame(blank_pixels()), now_ms=0.0)

    def test_idle_ticks(self, session, render_sink):
        """Verify idle ticks draw the orb and never touch gesture history."""
        session.start(now_ms=0.0)

        outputs = [
            session.tick(make_frame(blank_pixels(), frame_id=i), now_ms=i * 16.0)
            for i in range(1, 11)
        ]

        assert [o.tick for o in outputs] == list(range(1, 11))
        assert all(o.intent is None and o.motion_count == 0 for o in outputs)
        assert len(render_sink.orbs) == 10
        assert render_sink.pulses == []
        assert session.state.gestures.history == ()
        assert session.state.window.ticks == 0

    def test_motion_pulls_orb_toward_centroid(self, session):
        """Verify the orb follows the mirrored motion centroid."""
        session.start(now_ms=0.0)

        session.tick(make_frame(blank_pixels()), now_ms=0.0)
        output = session.tick(make_frame(block_pixels(0)), now_ms=16.0)

        # Block on the left of the frame appears on the right after mirroring
        assert output.centroid.target_x > 0.5
        assert output.orb.x > 0.5
        assert output.motion_count == 400

    def test_fold_triggers_save(self, session, backend, still_frames):
        """Verify the 60th motion tick folds the window and saves the profile."""
        session.start(now_ms=0.0)
        frames = still_frames(61)

        outputs = [session.tick(frame, now_ms=(i + 1) * 16.0) for i, frame in enumerate(frames)]

        assert not any(o.profile_saved for o in outputs[:-1])
        assert outputs[-1].profile_saved
        assert backend.write_count == 2
        assert session.state.window.ticks == 0

        profile = session.profile
        assert profile.visit_count == 1
        # 400 moved cells -> density 0.1 on every motion tick
        assert profile.avg_density == pytest.approx(0.2 * 0.92 + 0.1 * 0.08)
        assert profile.avg_speed == pytest.approx(0.02 * 0.92)
        assert profile.last_seen is not None

        stored = json.loads(backend.read(DEFAULT_NAMESPACE))
        assert stored["avgDensity"] == pytest.approx(profile.avg_density)

    def test_stop_gesture(self, session, render_sink, speech_sink, still_frames):
        """Verify a held still motion fires stop, pulses and speaks."""
        session.start(now_ms=0.0)

        outputs = [session.tick(frame, now_ms=i * 100.0) for i, frame in enumerate(still_frames(12))]

        fired = [o for o in outputs if o.intent is not None]
        assert len(fired) == 1
        stop = fired[0]
        assert stop.tick == 11
        assert stop.intent == Intent.STOP
        assert stop.phrase == Phrase.LISTENING
        assert (stop.orb.x, stop.orb.y) == (0.5, 0.45)
        assert stop.orb.size >= 0.28
        assert len(render_sink.pulses) == 1
        assert speech_sink.spoken == ["I am listening."]

    def test_speech_cooldown_spans_greeting(self, session, backend, speech_sink, still_frames):
        """Verify an intent right after the greeting fires silently."""
        _seed(backend)
        session.start(now_ms=0.0)

        outputs = [session.tick(frame, now_ms=i * 100.0) for i, frame in enumerate(still_frames(12))]

        stop = outputs[10]
        assert stop.intent == Intent.STOP
        assert stop.phrase is None
        assert speech_sink.spoken == ["Welcome back."]

    def test_swipe_gesture(self, session):
        """Verify a block sweeping right fires MOVE_LEFT on the mirrored orb."""
        session.start(now_ms=0.0)

        outputs = [
            session.tick(make_frame(block_pixels(x, w=30)), now_ms=i * 16.0)
            for i, x in enumerate((0, 40, 80, 120))
        ]

        assert [o.intent for o in outputs[:3]] == [None, None, None]
        assert outputs[3].intent == Intent.MOVE_LEFT
        assert outputs[3].phrase == Phrase.UNDERSTOOD
        assert outputs[3].orb.x < outputs[2].orb.x
        assert session.state.gestures.history == ()

    def test_degenerate_frame(self, session, diagnostics):
        """Verify a zero-sized frame is reported and the previous grid kept."""
        session.start(now_ms=0.0)
        session.tick(make_frame(blank_pixels()), now_ms=0.0)
        retained = session.state.detector.previous

        empty = Frame(pixels=np.zeros((0, 0, 3), dtype=np.uint8), width=0, height=0)
        output = session.tick(empty, now_ms=16.0)

        assert output.degenerate_frame
        assert output.motion_count == 0
        assert session.state.detector.previous is retained
        assert diagnostics.count(ErrorKind.DEGENERATE_FRAME) == 1

        after = session.tick(make_frame(block_pixels(60)), now_ms=32.0)
        assert after.motion_count == 400

    def test_malformed_frame(self, session, diagnostics):
        session.start(now_ms=0.0)

        flat = Frame(pixels=np.zeros((90, 160), dtype=np.uint8), width=160, height=90)
        output = session.tick(flat, now_ms=0.0)

        assert output.degenerate_frame
        assert diagnostics.count(ErrorKind.DEGENERATE_FRAME) == 1

    def test_list_buffer_reported_as_malformed(self, session, diagnostics):
        session.start(now_ms=0.0)

        output = session.tick(Frame(pixels=[[0] * 160] * 90, width=160, height=90), now_ms=0.0)

        assert output.degenerate_frame
        message = diagnostics.reports[-1].message
        assert "expected ndarray" in message
        assert "zero-sized" not in message

    def test_ticks_not_reentrant(self, settings, store):
        """Verify a tick started from inside another tick is rejected."""
        from visimos.pipeline import ReentrantTickError, VisimosSession

        class ReentrantSink:
            def __init__(self):
                self.session = None

            def draw_orb(self, command):
                self.session.tick(make_frame(blank_pixels()), now_ms=1.0)

            def draw_pulse(self, command):
                pass

        sink = ReentrantSink()
        session = VisimosSession(store, render_sink=sink, settings=settings)
        sink.session = session
        session.start(now_ms=0.0)

        with pytest.raises(ReentrantTickError, match="reentrant"):
            session.tick(make_frame(blank_pixels()), now_ms=0.0)

        sink.session = None
        session.render_sink = None
        assert session.tick(make_frame(blank_pixels()), now_ms=16.0).tick == 2

    def test_stop_does_not_write(self, session, backend):
        session.start(now_ms=0.0)
        session.tick(make_frame(blank_pixels()), now_ms=0.0)

        session.stop()

        assert backend.write_count == 1
        assert not session.is_running
        with pytest.raises(RuntimeError):
            session.tick(make_frame(blank_pixels()), now_ms=16.0)

    def test_metrics(self, session, still_frames):
        session.start(now_ms=0.0)
        for i, frame in enumerate(still_frames(12)):
            session.tick(frame, now_ms=i * 100.0)

        metrics = session.get_metrics()
        assert metrics["ticks"] == 12
        assert metrics["saves"] == 1
        assert metrics["intents_fired"] == 1
        assert metrics["phrases_spoken"] == 1
        assert metrics["frames_compared"] == 11
        assert metrics["output_failures"] == 0

    def test_tick_output_to_dict(self, session, still_frames):
        session.start(now_ms=0.0)
        outputs = [session.tick(frame, now_ms=i * 100.0) for i, frame in enumerate(still_frames(11))]

        record = outputs[-1].to_dict()
        assert record["tick"] == 11
        assert record["intent"] == "stop"
        assert record["phrase"] == "I am listening."
        assert record["orb"] == {"x": 0.5, "y": 0.45, "size": round(outputs[-1].orb.size, 4)}
        assert record["centroid"]["speed"] == 0.0


class TestSinkFailures:
    """Tests for collaborators that raise."""

    class BrokenVoice:
        def speak(self, phrase):
            raise OSError("audio device gone")

    class BrokenScreen:
        def draw_orb(self, command):
            raise OSError("window closed")

        def draw_pulse(self, command):
            raise OSError("window closed")

    def test_speech_failure_is_reported(self, store, diagnostics, settings, render_sink, still_frames):
        """Verify a raising speech sink is reported and the gesture tick completes."""
        from visimos.pipeline import VisimosSession

        session = VisimosSession(
            store,
            render_sink=render_sink,
            speech_sink=self.BrokenVoice(),
            diagnostics=diagnostics,
            settings=settings,
        )
        session.start(now_ms=0.0)

        outputs = [session.tick(frame, now_ms=i * 100.0) for i, frame in enumerate(still_frames(12))]

        assert len(outputs) == 12
        assert outputs[10].intent == Intent.STOP
        assert outputs[10].phrase == Phrase.LISTENING
        assert len(render_sink.pulses) == 1
        assert diagnostics.count(ErrorKind.OUTPUT_UNAVAILABLE) == 1
        assert "audio device gone" in diagnostics.reports[-1].message
        assert session.get_metrics()["output_failures"] == 1

    def test_greeting_failure_is_reported(self, store, backend, diagnostics, settings):
        from visimos.pipeline import VisimosSession

        _seed(backend)
        session = VisimosSession(
            store,
            speech_sink=self.BrokenVoice(),
            diagnostics=diagnostics,
            settings=settings,
        )

        start = session.start(now_ms=0.0)

        assert start.returning
        assert session.is_running
        assert diagnostics.count(ErrorKind.OUTPUT_UNAVAILABLE) == 1

    def test_render_failure_is_reported(self, store, diagnostics, settings, speech_sink, still_frames):
        """Verify a raising render sink never stops the session."""
        from visimos.pipeline import VisimosSession

        session = VisimosSession(
            store,
            render_sink=self.BrokenScreen(),
            speech_sink=speech_sink,
            diagnostics=diagnostics,
            settings=settings,
        )
        session.start(now_ms=0.0)

        outputs = [session.tick(frame, now_ms=i * 100.0) for i, frame in enumerate(still_frames(12))]

        assert [o.tick for o in outputs] == list(range(1, 13))
        # One orb per tick plus the stop pulse
        assert diagnostics.count(ErrorKind.OUTPUT_UNAVAILABLE) == 13
        assert speech_sink.spoken == ["I am listening."]


class TestOrbBounds:
    """Tests for the orb position bounds over long, mixed sequences."""

    def test_orb_stays_in_bounds(self, session, still_frames):
        """Verify every emitted orb stays within [0.08, 0.92] on both axes."""
        session.start(now_ms=0.0)

        empty = Frame(pixels=np.zeros((0, 0, 3), dtype=np.uint8), width=0, height=0)
        frames = (
            [make_frame(blank_pixels()), make_frame(block_pixels(0)), make_frame(blank_pixels())]
            + [make_frame(block_pixels(100)), make_frame(block_pixels(100, y=0, h=30))]
            + [make_frame(block_pixels(x, w=30)) for x in (0, 40, 80, 120)]
            + [make_frame(block_pixels(x, w=30)) for x in (120, 80, 40, 0)]
            + [empty]
            + still_frames(14, x=0)
            + [make_frame(block_pixels(0, y=60, h=30)), make_frame(block_pixels(100, y=0, h=30))]
            + still_frames(14, x=100)
            + [make_frame(blank_pixels()) for _ in range(20)]
            + [empty, make_frame(block_pixels(0))]
        )

        outputs = [session.tick(frame, now_ms=i * 100.0) for i, frame in enumerate(frames)]

        assert Intent.STOP in [o.intent for o in outputs]
        assert any(o.degenerate_frame for o in outputs)
        for output in outputs:
            assert 0.08 <= output.orb.x <= 0.92
            assert 0.08 <= output.orb.y <= 0.92


class TestTickGraph:
    """Tests for the graph used by the session."""

    def test_run_returns_next_state(self, settings):
        from visimos.models import OrbState, Profile, SessionState
        from visimos.pipeline import TickGraph

        graph = TickGraph(settings)
        state = SessionState(profile=Profile(), orb=OrbState(0.9, 0.9), fast_step=0.2)

        result = graph.run(state, make_frame(blank_pixels()), 0.0)

        assert result["session"].tick == 1
        assert result["session"].orb.x < 0.9
        assert result.get("centroid") is None
        assert result["fold"].should_save is False
        assert state.tick == 0
