"""Core module for psola-stretch."""

from .config import StretchConfig, PeriodBounds, VOICE_RANGES
from .engine import PlaybackEngine, PlaybackCursor
from .errors import StretchError, ConfigurationError, InputError, InvariantViolation
from .frame import Frame, FrameRing, FrameSynthesizer
from .pitch import PitchEstimate, PitchEstimator
from .report import StretchReport
from .stretcher import PsolaStretcher

__all__ = [
    "StretchConfig",
    "PeriodBounds",
    "VOICE_RANGES",
    "PlaybackEngine",
    "PlaybackCursor",
    "StretchError",
    "ConfigurationError",
    "InputError",
    "InvariantViolation",
    "Frame",
    "FrameRing",
    "FrameSynthesizer",
    "PitchEstimate",
    "PitchEstimator",
    "StretchReport",
    "PsolaStretcher",
]
