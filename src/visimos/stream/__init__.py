"""
Stream Module
=============

Frame acquisition for Visimos:
    - Frame: Typed frame data model (internal representation)
    - VideoSource: Protocol for frame providers
    - CameraVideoSource: OpenCV capture device
    - ReplayVideoSource: Plays back a fixed sequence of buffers

Example:
    from visimos.stream import CameraVideoSource

    source = CameraVideoSource(index=0)
    frame = source.read()
"""

from visimos.stream.frame import Frame
from visimos.stream.source import (
    CameraVideoSource,
    ReplayVideoSource,
    VideoSource,
    VideoSourceError,
)


__all__ = [
    "Frame",
    "VideoSource",
    "VideoSourceError",
    "CameraVideoSource",
    "ReplayVideoSource",
]
