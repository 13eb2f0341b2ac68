"""
Visimos Session
===============

One tracking session: profile load, per-tick pipeline, persistence
triggers and collaborator output.

Lifecycle:
    start()  load profile (defaults on absence/failure), count the visit,
             save, seed the orb, greet returning users
    tick()   run the tick graph, save on fold, emit draw/speech commands
    stop()   end the session; the profile stays as last saved

Ticks are strictly sequential. A tick that starts while another is
still running raises ReentrantTickError. Sink failures are reported as
OUTPUT_UNAVAILABLE and never end the tick.
"""

import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from visimos.config import Settings, settings as default_settings
from visimos.models.diagnostics import ErrorKind
from visimos.models.gesture import Phrase
from visimos.models.orb import OrbState
from visimos.models.output import OrbDrawCommand, TickOutput
from visimos.models.profile import Profile
from visimos.models.session import SessionState
from visimos.observability.diagnostics import DiagnosticsSink, LoggingDiagnosticsSink
from visimos.observability.sinks import RenderSink, SpeechSink
from visimos.persistence.store import ProfileStore
from visimos.pipeline.graph import TickGraph
from visimos.stream.frame import Frame


logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class ReentrantTickError(RuntimeError):
    """Raised when a tick starts while another tick is still running."""
    pass


@dataclass(frozen=True, slots=True)
class SessionStart:
    """
    Outcome of starting a session.

    Attributes:
        profile: Profile the session runs with (visit counted)
        returning: Whether a stored profile was found
        phrase: Greeting that passed the speech cooldown
        saved: Whether the visit increment was persisted
    """

    profile: Profile
    returning: bool
    phrase: Optional[Phrase] = None
    saved: bool = False


class VisimosSession:
    """
    Session orchestrator.

    Example:
        store = ProfileStore(JsonFileBackend("~/.local/share/visimos"))
        session = VisimosSession(store, render_sink=renderer, speech_sink=voice)

        session.start()
        while running:
            output = session.tick(source.read())
        session.stop()
    """

    def __init__(
        self,
        store: ProfileStore,
        render_sink: Optional[RenderSink] = None,
        speech_sink: Optional[SpeechSink] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        """
        Initialize session.

        Args:
            store: Profile persistence boundary
            render_sink: Receives orb/pulse draw commands
            speech_sink: Receives accepted phrases
            diagnostics: Receives failure reports
            settings: Configuration (loaded settings if None)
            clock: Millisecond clock used when a call passes no now_ms
        """
        self.settings = settings or default_settings
        self.store = store
        self.render_sink = render_sink
        self.speech_sink = speech_sink
        self.diagnostics = diagnostics or LoggingDiagnosticsSink()
        self._clock = clock

        self.graph = TickGraph(self.settings, diagnostics=self.diagnostics)

        self._state: Optional[SessionState] = None
        self._in_tick = False
        self._stopped = False
        self._saves = 0
        self._save_failures = 0
        self._output_failures = 0

        logger.info("VisimosSession initialized")

    @property
    def state(self) -> Optional[SessionState]:
        """Current session state (None before start)."""
        return self._state

    @property
    def profile(self) -> Optional[Profile]:
        return self._state.profile if self._state else None

    @property
    def orb(self) -> Optional[OrbState]:
        return self._state.orb if self._state else None

    @property
    def is_running(self) -> bool:
        return self._state is not None and not self._stopped

    def start(self, now_ms: Optional[float] = None) -> SessionStart:
        """
        Load the profile and prepare the session state.

        Args:
            now_ms: Start time in milliseconds (clock if None)

        Returns:
            SessionStart describing the loaded profile and greeting
        """
        if self._state is not None:
            raise RuntimeError("Session already started")
        if now_ms is None:
            now_ms = self._clock()

        loaded = self.store.load()
        returning = loaded is not None
        profile = loaded if loaded is not None else Profile()
        profile = profile.model_copy(update={"visit_count": profile.visit_count + 1})

        result = self.store.save(profile)
        if result.ok:
            self._saves += 1
        else:
            self._save_failures += 1
        profile = result.profile

        state = SessionState(
            profile=profile,
            orb=OrbState(x=0.5, y=0.5, size=profile.preferred_size),
            fast_step=self.graph.learner.fast_step(profile),
        )

        phrase = None
        if returning:
            speech, phrase = self.graph.speech.request(state.speech, Phrase.WELCOME_BACK, now_ms)
            state = replace(state, speech=speech)
            if phrase is not None and self.speech_sink is not None:
                self._deliver("speech", self.speech_sink.speak, phrase.value)

        self._state = state
        self._stopped = False

        logger.info(
            f"Session started ({'returning' if returning else 'first visit'}): "
            f"{profile.summary()}, fast_step={state.fast_step:.3f}"
        )

        return SessionStart(profile=profile, returning=returning, phrase=phrase, saved=result.ok)

    def tick(self, frame: Frame, now_ms: Optional[float] = None) -> TickOutput:
        """
        Process one frame.

        Args:
            frame: Frame pulled from the video source
            now_ms: Tick time in milliseconds (clock if None)

        Returns:
            TickOutput for this tick

        Raises:
            RuntimeError: If the session is not running
            ReentrantTickError: If a tick is already in progress
        """
        if not self.is_running:
            raise RuntimeError("Session is not running")
        if self._in_tick:
            raise ReentrantTickError("Ticks are not reentrant")
        if now_ms is None:
            now_ms = self._clock()

        self._in_tick = True
        try:
            result = self.graph.run(self._state, frame, now_ms)
            state: SessionState = result["session"]

            saved = False
            fold = result.get("fold")
            if fold is not None and fold.should_save:
                save = self.store.save(state.profile)
                if save.ok:
                    self._saves += 1
                    saved = True
                else:
                    self._save_failures += 1
                state = replace(state, profile=save.profile)

            self._state = state

            output = self._build_output(result, state, saved)
            self._emit(output)
        finally:
            self._in_tick = False

        if state.tick % self.settings.logging.log_every_n_ticks == 0:
            logger.info(
                f"Tick summary: {output.to_dict()}, "
                f"window={state.window.ticks}/{self.settings.learning.window_ticks}"
            )

        return output

    def _build_output(self, result: dict, state: SessionState, saved: bool) -> TickOutput:
        sample = result.get("sample")
        event = result.get("event")
        phrase = result.get("phrase")

        return TickOutput(
            tick=state.tick,
            orb=OrbDrawCommand(x=state.orb.x, y=state.orb.y, size=state.orb.size),
            pulse=event.pulse if event else None,
            phrase=phrase,
            intent=event.intent if event else None,
            motion_count=sample.motion_count if sample else 0,
            centroid=result.get("centroid"),
            profile_saved=saved,
            degenerate_frame=result.get("degenerate", False),
        )

    def _emit(self, output: TickOutput) -> None:
        if self.render_sink is not None:
            self._deliver("render", self.render_sink.draw_orb, output.orb)
            if output.pulse is not None:
                self._deliver("render", self.render_sink.draw_pulse, output.pulse)
        if self.speech_sink is not None and output.phrase is not None:
            self._deliver("speech", self.speech_sink.speak, output.phrase.value)

    def _deliver(self, sink: str, send: Callable[[Any], None], command: Any) -> bool:
        """
        Hand one command to a collaborator.

        A failing sink is reported as OUTPUT_UNAVAILABLE and the command is
        dropped. Reentrant ticks started from inside a sink still raise.
        """
        try:
            send(command)
        except ReentrantTickError:
            raise
        except Exception as e:
            self._output_failures += 1
            self.diagnostics.report(ErrorKind.OUTPUT_UNAVAILABLE, f"{sink} sink failed: {e}")
            return False
        return True

    def stop(self) -> None:
        """End the session without writing; the profile stays as last saved."""
        if self._stopped:
            return
        self._stopped = True
        if self._state is not None:
            logger.info(
                f"Session stopped after {self._state.tick} ticks "
                f"({self._saves} saves, {self._save_failures} failed)"
            )

    def get_metrics(self) -> dict:
        """Get session metrics for observability."""
        state = self._state
        return {
            "ticks": state.tick if state else 0,
            "saves": self._saves,
            "save_failures": self._save_failures,
            "output_failures": self._output_failures,
            "frames_compared": state.detector.frames_compared if state else 0,
            "intents_fired": state.gestures.intents_fired if state else 0,
            "intents_suppressed": state.gestures.intents_suppressed if state else 0,
            "phrases_spoken": state.speech.phrases_spoken if state else 0,
            "phrases_dropped": state.speech.phrases_dropped if state else 0,
            "fast_step": state.fast_step if state else None,
        }
