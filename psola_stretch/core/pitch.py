"""Pitch period estimation by average magnitude difference."""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .config import PeriodBounds


@dataclass(frozen=True)
class PitchEstimate:
    """Best matching period (samples) and voicing for one window."""
    period: int
    voiced: bool


class PitchEstimator:
    """
    Find the period that best repeats around an evaluation point.

    For every candidate period p the p samples before the evaluation point
    are compared with the p samples after it. The candidate with the lowest
    average absolute difference per sample wins; ties go to the shortest
    period.
    """

    def __init__(
        self,
        bounds: PeriodBounds,
        dtype=np.float64,
        voicing_floor: float = 100.0,
    ):
        """
        Initialize the estimator.

        Args:
            bounds: Allowed period range in samples
            dtype: Float type for difference accumulation
            voicing_floor: Minimum average difference for a voiced window
        """
        self.bounds = bounds
        self.dtype = dtype
        self.voicing_floor = voicing_floor

    def search_range(self, previous: Optional[PitchEstimate] = None) -> Tuple[int, int]:
        """
        Candidate periods to search, inclusive.

        A voiced previous estimate narrows the range to [2/3, 3/2] of its
        period, which tracks pitch continuity and avoids octave jumps.
        """
        low, high = self.bounds.min_period, self.bounds.max_period
        if previous is not None and previous.voiced:
            low = max(low, previous.period * 2 // 3)
            high = min(high, previous.period * 3 // 2)
        return low, high

    def differences(self, samples: np.ndarray, position: int, low: int, high: int) -> np.ndarray:
        """Sum of absolute differences for every candidate in [low, high]."""
        if position - high < 0 or position + high > len(samples):
            raise IndexError(
                f"Window at {position} needs {high} samples on each side "
                f"(signal has {len(samples)})"
            )

        window = samples[position - high:position + high].astype(self.dtype)
        center = high

        diffs = np.empty(high - low + 1, dtype=self.dtype)
        for i, period in enumerate(range(low, high + 1)):
            before = window[center - period:center]
            after = window[center:center + period]
            diffs[i] = np.abs(before - after).sum()
        return diffs

    def estimate(
        self,
        samples: np.ndarray,
        position: int,
        previous: Optional[PitchEstimate] = None
    ) -> PitchEstimate:
        """
        Estimate the pitch period at a position of a padded signal.

        Args:
            samples: Signal with at least max_period samples on both sides
                of position
            position: Evaluation point
            previous: Estimate from the previous step, if any

        Returns:
            PitchEstimate with period inside the searched range
        """
        low, high = self.search_range(previous)
        diffs = self.differences(samples, position, low, high)

        best_period = 0
        min_diff = 1.0
        for period, diff in zip(range(low, high + 1), diffs):
            # diff/period < min_diff/best_period without dividing
            if diff * best_period < min_diff * period:
                min_diff = diff
                best_period = period

        if best_period == 0:
            # Nothing beat the sentinel (NaN input); fall back to the range floor
            return PitchEstimate(period=low, voiced=False)

        periods = np.arange(low, high + 1, dtype=self.dtype)
        ave_diff = float(np.mean(diffs / periods))

        voiced = (
            min_diff * 2 <= ave_diff * best_period
            and ave_diff > self.voicing_floor
        )
        return PitchEstimate(period=best_period, voiced=bool(voiced))
