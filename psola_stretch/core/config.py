"""Configuration for the PSOLA engine."""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import ConfigurationError


# Expected pitch ranges (Hz)
VOICE_RANGES = {
    'default': (65.0, 400.0),
    'low': (65.0, 135.0),
}

FULL_CLIP_RANGE = (-32768, 32767)
LEGACY_CLIP_RANGE = (-32767, 32767)

STEP_POLICIES = ('full', 'half')
PRECISIONS = {
    'double': np.float64,
    'single': np.float32,
}


@dataclass(frozen=True)
class PeriodBounds:
    """Shortest and longest pitch period, in samples."""

    min_period: int
    max_period: int

    @classmethod
    def from_sample_rate(
        cls,
        sample_rate: int,
        min_freq: float,
        max_freq: float
    ) -> "PeriodBounds":
        """
        Derive period bounds from voice frequency limits.

        Args:
            sample_rate: Sample rate in Hz
            min_freq: Lowest expected fundamental (Hz)
            max_freq: Highest expected fundamental (Hz)

        Returns:
            PeriodBounds with 1 <= min_period <= max_period
        """
        if sample_rate <= 0:
            raise ConfigurationError(f"Sample rate must be positive, got {sample_rate}")

        min_period = int(sample_rate // max_freq)
        max_period = int(sample_rate // min_freq)

        if min_period < 1 or min_period > max_period:
            raise ConfigurationError(
                f"Invalid period bounds [{min_period}, {max_period}] for "
                f"{sample_rate} Hz and {min_freq}-{max_freq} Hz voice range"
            )

        return cls(min_period=min_period, max_period=max_period)

    @property
    def guard(self) -> int:
        """Zero padding on each side of the signal."""
        # Frames read two periods back, the estimator one period forward.
        return 2 * self.max_period

    def __contains__(self, period: int) -> bool:
        return self.min_period <= period <= self.max_period


@dataclass
class StretchConfig:
    """Configuration for one stretch run."""

    speed: float = 1.0
    min_voice_freq: float = VOICE_RANGES['default'][0]
    max_voice_freq: float = VOICE_RANGES['default'][1]

    # 'full' steps one period per frame, 'half' steps half a period
    step_policy: str = 'full'

    # 'double' or 'single' accumulation for differences, frames and cursor
    precision: str = 'double'

    clip_range: Tuple[int, int] = FULL_CLIP_RANGE

    # Average difference per sample below which a window counts as silence
    voicing_floor: float = 100.0

    @classmethod
    def for_voice(cls, voice: str, speed: float, **kwargs) -> "StretchConfig":
        """Build a config from one of the VOICE_RANGES presets."""
        if voice not in VOICE_RANGES:
            raise ConfigurationError(
                f"Unknown voice range '{voice}'. Choose from: {', '.join(VOICE_RANGES)}"
            )
        min_freq, max_freq = VOICE_RANGES[voice]
        return cls(speed=speed, min_voice_freq=min_freq, max_voice_freq=max_freq, **kwargs)

    @property
    def dtype(self):
        """Numpy float type used for all sample-domain arithmetic."""
        return PRECISIONS[self.precision]

    def validate(self) -> "StretchConfig":
        """Raise ConfigurationError on any invalid setting."""
        if not math.isfinite(self.speed) or self.speed <= 0:
            raise ConfigurationError(f"Speed must be a positive number, got {self.speed}")

        if self.min_voice_freq <= 0 or self.max_voice_freq <= 0:
            raise ConfigurationError("Voice frequency bounds must be positive")
        if self.min_voice_freq > self.max_voice_freq:
            raise ConfigurationError(
                f"min_voice_freq ({self.min_voice_freq}) exceeds "
                f"max_voice_freq ({self.max_voice_freq})"
            )

        if self.step_policy not in STEP_POLICIES:
            raise ConfigurationError(
                f"Unknown step policy '{self.step_policy}'. Choose from: {', '.join(STEP_POLICIES)}"
            )
        if self.precision not in PRECISIONS:
            raise ConfigurationError(
                f"Unknown precision '{self.precision}'. Choose from: {', '.join(PRECISIONS)}"
            )

        low, high = self.clip_range
        if low >= high or low < FULL_CLIP_RANGE[0] or high > FULL_CLIP_RANGE[1]:
            raise ConfigurationError(f"Invalid clip range {self.clip_range}")

        return self

    def bounds_for(self, sample_rate: int) -> PeriodBounds:
        """Period bounds for a signal at the given sample rate."""
        return PeriodBounds.from_sample_rate(
            sample_rate, self.min_voice_freq, self.max_voice_freq
        )

    def step_size(self, period: int) -> int:
        """Input-domain advance for a frame of the given period."""
        if self.step_policy == 'half':
            return max(1, period // 2)
        return period
