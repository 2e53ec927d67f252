"""
PSOLA-Stretch: pitch-preserving speed change by pitch-synchronous overlap-add.
"""

from .core.stretcher import PsolaStretcher
from .core.config import StretchConfig
from .core.report import StretchReport
from .core.errors import StretchError, ConfigurationError, InputError, InvariantViolation

__version__ = "0.1.0"
__all__ = [
    "PsolaStretcher",
    "StretchConfig",
    "StretchReport",
    "StretchError",
    "ConfigurationError",
    "InputError",
    "InvariantViolation",
]
