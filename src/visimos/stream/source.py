"""
Video Sources
=============

Frame acquisition boundary.

The core pulls one frame per tick from a VideoSource. A source that
cannot start, or stops delivering frames, raises VideoSourceError. That
is a terminal status for the session: it is reported once upstream and
never retried here.
"""

import logging
import time
from typing import Iterable, Iterator, Optional, Protocol

import cv2
import numpy as np

from visimos.stream.frame import Frame


logger = logging.getLogger(__name__)


class VideoSourceError(Exception):
    """Raised when the video source is unavailable."""
    pass


class VideoSource(Protocol):
    """
    Protocol for frame providers.

    Implementations:
        - CameraVideoSource: OpenCV capture device
        - ReplayVideoSource: Pre-recorded or synthetic frames
    """

    def read(self) -> Frame:
        """
        Pull the next frame.

        Raises:
            VideoSourceError: If no frame can be delivered
        """
        ...

    def close(self) -> None:
        """Release the underlying device."""
        ...


class CameraVideoSource:
    """
    OpenCV camera source.

    Captures BGR frames through cv2.VideoCapture and converts them to
    RGB before handing them to the core.

    Attributes:
        index: OpenCV camera index
        width: Requested capture width
        height: Requested capture height
    """

    def __init__(self, index: int = 0, width: int = 1280, height: int = 720) -> None:
        """
        Open the capture device.

        Raises:
            VideoSourceError: If the device cannot be opened
        """
        self.index = index
        self.width = width
        self.height = height
        self._frame_id = 0

        self._cap = cv2.VideoCapture(index)
        if not self._cap.isOpened():
            self._cap.release()
            raise VideoSourceError(f"Camera {index} could not be opened")

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

        logger.info(f"CameraVideoSource opened: index={index}, requested={width}x{height}")

    def read(self) -> Frame:
        ok, bgr = self._cap.read()
        if not ok or bgr is None:
            raise VideoSourceError(f"Camera {self.index} stopped delivering frames")

        self._frame_id += 1
        rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
        return Frame.from_rgb(
            rgb,
            frame_id=self._frame_id,
            timestamp_ms=time.monotonic() * 1000.0,
        )

    def close(self) -> None:
        self._cap.release()
        logger.info(f"CameraVideoSource closed: index={self.index}")


class ReplayVideoSource:
    """
    Replays RGB(A) buffers in order.

    Useful for offline runs and tests. Raises VideoSourceError once the
    sequence is exhausted, like a camera that went away.
    """

    def __init__(self, buffers: Iterable[np.ndarray], frame_interval_ms: float = 1000.0 / 60.0) -> None:
        self._buffers: Iterator[np.ndarray] = iter(buffers)
        self._frame_interval_ms = frame_interval_ms
        self._frame_id = 0
        self._closed = False

    def read(self) -> Frame:
        if self._closed:
            raise VideoSourceError("Replay source is closed")
        pixels: Optional[np.ndarray] = next(self._buffers, None)
        if pixels is None:
            raise VideoSourceError("Replay source exhausted")

        self._frame_id += 1
        return Frame.from_rgb(
            pixels,
            frame_id=self._frame_id,
            timestamp_ms=self._frame_id * self._frame_interval_ms,
        )

    def close(self) -> None:
        self._closed = True
