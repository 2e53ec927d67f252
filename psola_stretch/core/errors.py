"""Exceptions raised by psola-stretch."""


class StretchError(Exception):
    """Base class for all psola-stretch errors."""


class ConfigurationError(StretchError, ValueError):
    """Invalid speed, frequency bounds, or policy."""


class InputError(StretchError, ValueError):
    """Unreadable or empty input signal."""


class InvariantViolation(StretchError, RuntimeError):
    """Broken position bookkeeping or a degenerate pitch search.

    Always fatal for the run; the output is never clamped into shape.
    """
