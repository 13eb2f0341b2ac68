"""
Visimos Main Application
========================

Webcam entry point: captures frames, runs the session, and shows the
orb overlay in an OpenCV window.

Exit codes:
    0 - stopped by the user (ESC, Ctrl+C or SIGTERM)
    1 - video input unavailable
"""

import logging
import signal
import sys
from typing import Optional

import cv2

from visimos.config import Settings, load_config, setup_logging
from visimos.models.diagnostics import ErrorKind
from visimos.observability import LoggingDiagnosticsSink, LoggingSpeechSink, OverlayRenderer
from visimos.persistence import JsonFileBackend, ProfileStore
from visimos.pipeline import VisimosSession
from visimos.stream import CameraVideoSource, VideoSourceError


logger = logging.getLogger(__name__)


WINDOW_TITLE = "Visimos"
ESC_KEY = 27

_shutdown_flag: bool = False


def _handle_sigterm(signum, frame):
    """Handle SIGTERM for graceful shutdown."""
    global _shutdown_flag
    logger.info("Received SIGTERM, stopping session...")
    _shutdown_flag = True


def run(settings: Settings) -> int:
    """
    Run a webcam session until the user quits or the camera fails.

    Args:
        settings: Loaded configuration

    Returns:
        Process exit code
    """
    diagnostics = LoggingDiagnosticsSink()

    try:
        source = CameraVideoSource(
            index=settings.camera.index,
            width=settings.camera.width,
            height=settings.camera.height,
        )
    except VideoSourceError as e:
        diagnostics.report(ErrorKind.INPUT_UNAVAILABLE, f"Camera error: {e}")
        return 1

    store = ProfileStore(
        JsonFileBackend(settings.persistence.directory),
        namespace=settings.persistence.namespace,
        diagnostics=diagnostics,
    )
    renderer = OverlayRenderer()
    session = VisimosSession(
        store,
        render_sink=renderer,
        speech_sink=LoggingSpeechSink(),
        diagnostics=diagnostics,
        settings=settings,
    )

    exit_code = 0
    session.start()
    logger.info("Camera running. ESC to quit.")

    try:
        while not _shutdown_flag:
            try:
                frame = source.read()
            except VideoSourceError as e:
                diagnostics.report(ErrorKind.INPUT_UNAVAILABLE, str(e))
                exit_code = 1
                break

            canvas = cv2.cvtColor(frame.pixels, cv2.COLOR_RGB2BGR)
            renderer.begin(canvas)
            session.tick(frame)

            cv2.imshow(WINDOW_TITLE, canvas)
            if cv2.waitKey(1) & 0xFF == ESC_KEY:
                break
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        session.stop()
        source.close()
        cv2.destroyAllWindows()
        logger.info(f"Session metrics: {session.get_metrics()}")
        logger.info(f"Diagnostics: {diagnostics.get_metrics()}")

    return exit_code


def main(config_path: Optional[str] = None) -> int:
    """Load configuration, set up logging and run."""
    settings = load_config(config_path)
    setup_logging(settings)
    signal.signal(signal.SIGTERM, _handle_sigterm)
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
