"""
Tick Graph
==========

LangGraph state machine for one tick of the orb tracker.

LangGraph is used for CONTROL FLOW only. Every node is a deterministic
function of the graph state; all session state travels in and out
through the `session` channel.

Graph Structure:
    START → sample_frame → detect_motion → track_centroid
        ├─ motion → smooth_motion → observe_window ─┐
        └─ idle   → smooth_idle ────────────────────┤
                                                    ▼
                          recognize_gestures → fold_profile → END

Nodes:
    - sample_frame: Frame -> LuminanceGrid (degenerate frames become empty grids)
    - detect_motion: Strided frame differencing against the retained grid
    - track_centroid: Centroid + speed, or None when there is no motion
    - smooth_motion / smooth_idle: Orb smoothing in either regime
    - observe_window: Add density/speed to the learning window (motion only)
    - recognize_gestures: Stop/swipe detection, intent and speech cooldowns
    - fold_profile: EMA fold when the window is full; emits the save trigger

Node names differ from the state keys; LangGraph rejects a node that
shares its name with a state channel.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional, TypedDict

from langgraph.graph import END, StateGraph

from visimos.config import Settings, settings as default_settings
from visimos.gestures import GestureRecognizer, SpeechCooldown
from visimos.models.diagnostics import ErrorKind
from visimos.models.gesture import Phrase
from visimos.models.learning import FoldResult
from visimos.models.motion import Centroid, LuminanceGrid, MotionSample
from visimos.models.output import GestureEvent
from visimos.models.session import SessionState
from visimos.observability.diagnostics import DiagnosticsSink, LoggingDiagnosticsSink
from visimos.perception import CentroidTracker, FrameDecodeError, MotionDetector, sample_luminance
from visimos.signals import OrbSmoother, ProfileLearner
from visimos.stream.frame import Frame


logger = logging.getLogger(__name__)


class TickGraphState(TypedDict):
    """
    State passed through the tick graph.

    Attributes:
        session: Session state in, updated session state out
        frame: Frame for this tick
        now_ms: Tick time in milliseconds
        grid: Sampled luminance grid
        degenerate: Whether the frame could not be sampled
        sample: Motion sample
        centroid: Centroid when motion is present
        event: Accepted gesture event
        phrase: Phrase that passed the speech cooldown
        fold: Fold result (carries the save trigger)
    """
    session: SessionState
    frame: Frame
    now_ms: float
    grid: Optional[LuminanceGrid]
    degenerate: bool
    sample: Optional[MotionSample]
    centroid: Optional[Centroid]
    event: Optional[GestureEvent]
    phrase: Optional[Phrase]
    fold: Optional[FoldResult]


class TickGraph:
    """
    Compiled per-tick pipeline.

    Owns the stateless components (they only hold configuration) and
    wires them into a LangGraph workflow.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
    ) -> None:
        """
        Initialize the tick graph.

        Args:
            settings: Configuration (loaded settings if None)
            diagnostics: Sink for degenerate frame reports
        """
        self.settings = settings or default_settings
        self.diagnostics = diagnostics or LoggingDiagnosticsSink()

        self.detector = MotionDetector(self.settings.motion)
        self.tracker = CentroidTracker()
        self.smoother = OrbSmoother(self.settings.smoothing)
        self.recognizer = GestureRecognizer(self.settings.gestures)
        self.learner = ProfileLearner(self.settings.learning)
        self.speech = SpeechCooldown(self.settings.speech.cooldown_ms)

        self._graph = self._build_graph()

        logger.info("TickGraph initialized")

    def _build_graph(self):
        """Build the LangGraph workflow."""
        workflow = StateGraph(TickGraphState)

        workflow.add_node("sample_frame", self._sample_node)
        workflow.add_node("detect_motion", self._detect_node)
        workflow.add_node("track_centroid", self._track_node)
        workflow.add_node("smooth_motion", self._smooth_node)
        workflow.add_node("smooth_idle", self._smooth_node)
        workflow.add_node("observe_window", self._observe_node)
        workflow.add_node("recognize_gestures", self._gestures_node)
        workflow.add_node("fold_profile", self._fold_node)

        workflow.set_entry_point("sample_frame")
        workflow.add_edge("sample_frame", "detect_motion")
        workflow.add_edge("detect_motion", "track_centroid")
        workflow.add_conditional_edges(
            "track_centroid",
            self._route_motion,
            {"motion": "smooth_motion", "idle": "smooth_idle"},
        )
        workflow.add_edge("smooth_motion", "observe_window")
        workflow.add_edge("observe_window", "recognize_gestures")
        workflow.add_edge("smooth_idle", "recognize_gestures")
        workflow.add_edge("recognize_gestures", "fold_profile")
        workflow.add_edge("fold_profile", END)

        return workflow.compile()

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def _sample_node(self, state: TickGraphState) -> Dict[str, Any]:
        frame = state["frame"]
        try:
            grid = sample_luminance(frame, self.settings.motion)
        except FrameDecodeError as e:
            self.diagnostics.report(ErrorKind.DEGENERATE_FRAME, str(e))
            return {"grid": LuminanceGrid.empty(), "degenerate": True}

        if grid.is_empty:
            self.diagnostics.report(
                ErrorKind.DEGENERATE_FRAME,
                f"Frame {frame.frame_id} is zero-sized ({frame.width}x{frame.height})",
            )
            return {"grid": grid, "degenerate": True}

        return {"grid": grid, "degenerate": False}

    def _detect_node(self, state: TickGraphState) -> Dict[str, Any]:
        session = state["session"]
        detector_state, sample = self.detector.step(session.detector, state["grid"])
        return {
            "session": replace(session, detector=detector_state),
            "sample": sample,
        }

    def _track_node(self, state: TickGraphState) -> Dict[str, Any]:
        session = state["session"]
        previous, centroid = self.tracker.step(session.previous_centroid, state["sample"])
        return {
            "session": replace(session, previous_centroid=previous),
            "centroid": centroid,
        }

    def _route_motion(self, state: TickGraphState) -> str:
        return "motion" if state.get("centroid") is not None else "idle"

    def _smooth_node(self, state: TickGraphState) -> Dict[str, Any]:
        session = state["session"]
        orb = self.smoother.step(
            session.orb,
            state.get("centroid"),
            state["sample"],
            session.profile,
            session.fast_step,
        )
        return {"session": replace(session, orb=orb)}

    def _observe_node(self, state: TickGraphState) -> Dict[str, Any]:
        session = state["session"]
        window = self.learner.observe(
            session.window,
            density=state["sample"].density,
            speed=state["centroid"].speed,
        )
        return {"session": replace(session, window=window)}

    def _gestures_node(self, state: TickGraphState) -> Dict[str, Any]:
        session = state["session"]
        now_ms = state["now_ms"]

        gestures, orb, event = self.recognizer.step(
            session.gestures,
            state.get("centroid"),
            state["sample"],
            session.orb,
            now_ms,
        )
        speech = session.speech
        phrase = None
        if event is not None:
            speech, phrase = self.speech.request(speech, event.phrase, now_ms)

        # Gesture effects stay inside the smoothing bounds before rendering
        orb = self.smoother.clamp(orb)

        return {
            "session": replace(session, gestures=gestures, orb=orb, speech=speech),
            "event": event,
            "phrase": phrase,
        }

    def _fold_node(self, state: TickGraphState) -> Dict[str, Any]:
        session = state["session"]
        result = self.learner.maybe_fold(session.window, session.profile, session.orb.size)
        return {
            "session": replace(
                session,
                window=result.window,
                profile=result.profile,
                fast_step=result.fast_step,
                tick=session.tick + 1,
            ),
            "fold": result,
        }

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def run(self, session: SessionState, frame: Frame, now_ms: float) -> TickGraphState:
        """
        Run one tick.

        Args:
            session: Session state before the tick
            frame: Frame for this tick
            now_ms: Tick time in milliseconds

        Returns:
            Final graph state; `session` holds the updated SessionState
        """
        return self._graph.invoke({
            "session": session,
            "frame": frame,
            "now_ms": now_ms,
            "grid": None,
            "degenerate": False,
            "sample": None,
            "centroid": None,
            "event": None,
            "phrase": None,
            "fold": None,
        })
