"""
Diagnostic Kinds
================

Fixed taxonomy of reportable failures.

Rules:
    - Every reported error carries exactly ONE kind
    - No failure propagates out of a tick as a crash
    - Nothing in the core is retried
"""

from enum import Enum


class ErrorKind(str, Enum):
    """
    Machine-readable failure categories.

    Attributes:
        INPUT_UNAVAILABLE: Video source failed to start or stopped
            delivering frames. Fatal to the session, reported once.
        PERSISTENCE_UNAVAILABLE: Profile load or save failed. Non-fatal;
            defaults are used on load, the save is skipped.
        DEGENERATE_FRAME: Zero-sized or malformed frame. Treated as a
            tick without motion; the previous valid grid is kept.
        OUTPUT_UNAVAILABLE: A render or speech sink raised. Non-fatal;
            the command is dropped and the tick completes.
    """

    INPUT_UNAVAILABLE = "INPUT_UNAVAILABLE"
    PERSISTENCE_UNAVAILABLE = "PERSISTENCE_UNAVAILABLE"
    DEGENERATE_FRAME = "DEGENERATE_FRAME"
    OUTPUT_UNAVAILABLE = "OUTPUT_UNAVAILABLE"
