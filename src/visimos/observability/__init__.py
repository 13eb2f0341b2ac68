"""
Observability Module
====================

Collaborator boundaries that observe the core without influencing it.

Components:
    - DiagnosticsSink / LoggingDiagnosticsSink: failure reports
    - RenderSink / SpeechSink: output protocols
    - OverlayRenderer: OpenCV orb/pulse drawing
    - LoggingSpeechSink, RecordingRenderSink: headless sinks
"""

from visimos.observability.diagnostics import (
    DiagnosticReport,
    DiagnosticsSink,
    LoggingDiagnosticsSink,
)
from visimos.observability.overlay import OverlayRenderer
from visimos.observability.sinks import (
    LoggingSpeechSink,
    RecordingRenderSink,
    RenderSink,
    SpeechSink,
)

__all__ = [
    "DiagnosticReport",
    "DiagnosticsSink",
    "LoggingDiagnosticsSink",
    "RenderSink",
    "SpeechSink",
    "LoggingSpeechSink",
    "RecordingRenderSink",
    "OverlayRenderer",
]
