"""
Test Configuration
==================

Pytest fixtures and frame builders for Visimos.

Frames are 160x90 so the luminance grid is the frame itself (no
resize). With stride 3 a 60x60 block covers 20x20 = 400 sampled cells,
which clears both the motion threshold (160) and the stop threshold
(300).
"""

import numpy as np
import pytest


GRID_W = 160
GRID_H = 90


def blank_pixels(width: int = GRID_W, height: int = GRID_H, value: int = 0) -> np.ndarray:
    """Uniform RGB buffer."""
    return np.full((height, width, 3), value, dtype=np.uint8)


def block_pixels(
    x: int,
    y: int = 15,
    w: int = 60,
    h: int = 60,
    width: int = GRID_W,
    height: int = GRID_H,
) -> np.ndarray:
    """Black RGB buffer with a white block at (x, y)."""
    pixels = blank_pixels(width, height)
    pixels[y:y + h, x:x + w] = 255
    return pixels


def make_frame(pixels: np.ndarray, frame_id: int = 0):
    from visimos.stream.frame import Frame

    return Frame.from_rgb(pixels, frame_id=frame_id)


@pytest.fixture
def settings():
    """Default settings, independent of any config.yaml or VISIMOS_* variables."""
    from visimos.config import Settings

    return Settings()


@pytest.fixture
def diagnostics():
    from visimos.observability import LoggingDiagnosticsSink

    return LoggingDiagnosticsSink()


@pytest.fixture
def backend():
    from visimos.persistence import InMemoryBackend

    return InMemoryBackend()


@pytest.fixture
def store(backend, diagnostics):
    from visimos.persistence import ProfileStore

    return ProfileStore(backend, diagnostics=diagnostics)


@pytest.fixture
def render_sink():
    from visimos.observability import RecordingRenderSink

    return RecordingRenderSink()


@pytest.fixture
def speech_sink():
    from visimos.observability import LoggingSpeechSink

    return LoggingSpeechSink()


@pytest.fixture
def session(store, render_sink, speech_sink, diagnostics, settings):
    """Session wired to in-memory collaborators (not started)."""
    from visimos.pipeline import VisimosSession

    return VisimosSession(
        store,
        render_sink=render_sink,
        speech_sink=speech_sink,
        diagnostics=diagnostics,
        settings=settings,
        clock=lambda: 0.0,
    )


@pytest.fixture
def still_frames():
    """Alternating blank/block frames: constant motion at a fixed centroid."""
    def build(count: int, x: int = 60):
        frames = []
        for i in range(count):
            pixels = block_pixels(x) if i % 2 else blank_pixels()
            frames.append(make_frame(pixels, frame_id=i + 1))
        return frames

    return build
