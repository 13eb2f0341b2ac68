"""
Visimos
=======

Motion-driven focal orb with gesture recognition and an adaptive,
persisted per-user profile.

Each tick a video frame is reduced to a luminance grid, differenced
against the previous one, and the centroid of the moved pixels drives
an exponentially smoothed "orb". Holding still triggers a "stop"
intent, a horizontal sweep triggers "move_left"/"move_right", and a
windowed EMA learns the user's typical motion density, speed and
preferred orb size across sessions.

Components:
    - perception: Luminance sampling, motion detection, centroid tracking
    - signals: Orb smoothing and profile learning
    - gestures: Stop/swipe recognition and cooldown gates
    - persistence: Profile load/save boundary
    - pipeline: LangGraph tick graph and session orchestration
    - stream / observability: Video, render, speech and diagnostics boundaries

Example:
    from visimos.persistence import InMemoryBackend, ProfileStore
    from visimos.pipeline import VisimosSession

    session = VisimosSession(ProfileStore(InMemoryBackend()))
    session.start()
    output = session.tick(frame)
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
