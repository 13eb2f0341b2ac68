"""
Gestures Module
===============

Gesture recognition and cooldown gates.

    - GestureRecognizer: Stop (stillness hold) and swipe detectors
    - Cooldown: Elapsed-time gate shared by intents
    - SpeechCooldown: Gate for spoken acknowledgments
"""

from visimos.gestures.cooldown import Cooldown, SpeechCooldown
from visimos.gestures.recognizer import GestureRecognizer

__all__ = ["GestureRecognizer", "Cooldown", "SpeechCooldown"]
