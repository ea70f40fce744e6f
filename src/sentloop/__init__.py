"""Sentence-by-sentence audio playback with repeat cycles."""

__version__ = "0.1.0"
