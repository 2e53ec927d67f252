"""Analyzer subpackage for audio I/O."""

from .audio import AudioAnalyzer

__all__ = [
    "AudioAnalyzer",
]
