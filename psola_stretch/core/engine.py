"""Pitch-synchronous overlap-add playback engine."""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .config import StretchConfig
from .errors import InputError, InvariantViolation
from .frame import FrameRing, FrameSynthesizer
from .pitch import PitchEstimate, PitchEstimator

logger = logging.getLogger(__name__)


@dataclass
class PlaybackCursor:
    """Read and write positions, in padded-signal coordinates."""
    input_pos: int
    exact_input_pos: float
    output_pos: int = 0


class PlaybackEngine:
    """
    Resynthesize one channel at a new speed, one pitch period per step.

    Each step rotates the frame ring, estimates the period one step ahead,
    synthesizes the next frame there, and cross-fades previous -> current
    while a fractional read head moves through the step at `speed` input
    samples per output sample.
    """

    def __init__(self, samples: np.ndarray, sample_rate: int, config: StretchConfig):
        """
        Initialize the engine for a single channel.

        Args:
            samples: 1-D integer samples (int16 range)
            sample_rate: Sample rate in Hz
            config: Validated stretch configuration
        """
        samples = np.asarray(samples)
        if samples.ndim != 1:
            raise InputError(f"Engine expects a single channel, got shape {samples.shape}")
        if len(samples) == 0:
            raise InputError("Cannot stretch an empty signal")

        self.config = config.validate()
        self.sample_rate = sample_rate
        self.bounds = config.bounds_for(sample_rate)
        self.dtype = config.dtype
        self.input_length = len(samples)

        guard = self.bounds.guard
        self.samples = np.pad(samples.astype(np.int32), (guard, guard), mode='constant')
        self.end_pos = guard + self.input_length

        self.estimator = PitchEstimator(self.bounds, self.dtype, config.voicing_floor)
        self.synthesizer = FrameSynthesizer(self.dtype)
        self.frames = FrameRing(self.bounds.max_period, self.bounds.min_period, self.dtype)

        self.cursor = PlaybackCursor(input_pos=guard, exact_input_pos=float(guard))
        self.last_estimate: Optional[PitchEstimate] = None
        self.estimates: List[PitchEstimate] = []
        self.clipped_samples = 0
        self._chunks: List[np.ndarray] = []

    @property
    def finished(self) -> bool:
        """True once the input cursor has reached the end of the signal."""
        return self.cursor.input_pos >= self.end_pos

    def step(self) -> int:
        """
        Advance by one step and append its output.

        Returns:
            Number of output samples emitted
        """
        self.frames.rotate()
        outgoing = self.frames.previous
        step_size = self.config.step_size(outgoing.period)

        target = self.cursor.input_pos + step_size
        estimate = self.estimator.estimate(self.samples, target, self.last_estimate)
        if estimate.period not in self.bounds:
            raise InvariantViolation(
                f"Pitch search returned period {estimate.period} outside "
                f"[{self.bounds.min_period}, {self.bounds.max_period}] at {target}"
            )

        buffer = self.frames.claim(estimate.period)
        self.synthesizer.synthesize(self.samples, target, estimate.period, out=buffer)
        self.frames.current.pos = self.synthesizer.handoff_position(
            outgoing.pos, step_size, estimate.period
        )

        emitted = self._play(step_size)

        self.cursor.input_pos += step_size
        self.last_estimate = estimate
        self.estimates.append(estimate)

        logger.debug(
            "step at %d: period=%d voiced=%s emitted=%d",
            target, estimate.period, estimate.voiced, emitted
        )
        return emitted

    def _play(self, step_size: int) -> int:
        """Cross-fade previous -> current until the read head passes the step."""
        speed = self.config.speed
        offset = self.dtype(self.cursor.exact_input_pos) - self.dtype(self.cursor.input_pos)

        count = max(0, math.ceil((step_size - offset) / speed))
        # Float rounding can leave ceil() one off either way
        while count > 0 and offset + (count - 1) * speed >= step_size:
            count -= 1
        while offset + count * speed < step_size:
            count += 1

        offsets = offset + self.dtype(speed) * np.arange(count, dtype=self.dtype)
        ratios = offsets / self.dtype(step_size)
        if count and (ratios.min() < 0 or ratios.max() > 1):
            raise InvariantViolation(
                f"Crossfade ratio left [0, 1] ({ratios.min():.4f}..{ratios.max():.4f}) "
                f"at input position {self.cursor.input_pos}"
            )

        previous = self.frames.previous.read(count)
        current = self.frames.current.read(count)
        blended = (1 - ratios) * previous + ratios * current

        self._chunks.append(self._saturate(blended))
        self.cursor.output_pos += count
        self.cursor.exact_input_pos = float(
            self.dtype(self.cursor.input_pos + offset + count * speed)
        )
        return count

    def _saturate(self, blended: np.ndarray) -> np.ndarray:
        """Round to nearest and clamp to the configured integer range."""
        low, high = self.config.clip_range
        rounded = np.rint(blended)
        out_of_range = (rounded < low) | (rounded > high)
        if out_of_range.any():
            self.clipped_samples += int(out_of_range.sum())
        return np.clip(rounded, low, high).astype(np.int16)

    def output(self) -> np.ndarray:
        """All samples emitted so far as one int16 array."""
        if not self._chunks:
            return np.zeros(0, dtype=np.int16)
        if len(self._chunks) > 1:
            self._chunks = [np.concatenate(self._chunks)]
        return self._chunks[0]
