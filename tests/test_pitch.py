"""Tests for the pitch period estimator."""

import numpy as np
import pytest

from psola_stretch.core.config import PeriodBounds
from psola_stretch.core.pitch import PitchEstimate, PitchEstimator

from conftest import make_sine, pad


@pytest.fixture
def bounds():
    # 8 kHz with a 65-400 Hz voice range
    return PeriodBounds.from_sample_rate(8000, 65, 400)


@pytest.fixture
def estimator(bounds):
    return PitchEstimator(bounds)


class TestSearchRange:

    def test_full_range_without_history(self, estimator):
        assert estimator.search_range(None) == (20, 123)

    def test_full_range_after_unvoiced(self, estimator):
        assert estimator.search_range(PitchEstimate(80, False)) == (20, 123)

    def test_narrowed_after_voiced(self, estimator):
        assert estimator.search_range(PitchEstimate(80, True)) == (53, 120)

    def test_narrowed_range_clamped_to_bounds(self, estimator):
        assert estimator.search_range(PitchEstimate(21, True)) == (20, 31)
        assert estimator.search_range(PitchEstimate(120, True)) == (80, 123)


class TestEstimate:

    def test_sine_period_and_voicing(self, estimator, sine_100hz):
        samples = pad(sine_100hz, 246)
        for position in range(246 + 200, 246 + len(sine_100hz) - 200, 97):
            estimate = estimator.estimate(samples, position)
            assert estimate == PitchEstimate(period=80, voiced=True)

    def test_sine_with_voiced_history(self, estimator, sine_100hz):
        samples = pad(sine_100hz, 246)
        estimate = estimator.estimate(samples, 1000, PitchEstimate(75, True))
        assert estimate.period == 80
        assert estimate.voiced

    def test_tie_goes_to_shortest_period(self, estimator):
        # 200 Hz repeats every 40 samples, so 40 and 80 both match exactly
        samples = pad(make_sine(200.0, 8000, 0.25), 246)
        estimate = estimator.estimate(samples, 1000)
        assert estimate.period == 40

    def test_silence_is_unvoiced_at_min_period(self, estimator):
        samples = np.zeros(2000, dtype=np.int32)
        estimate = estimator.estimate(samples, 1000)
        assert estimate == PitchEstimate(period=20, voiced=False)

    def test_constant_window_is_deterministic(self, estimator):
        samples = np.full(2000, 1000, dtype=np.int32)
        first = estimator.estimate(samples, 1000)
        second = estimator.estimate(samples, 1000)
        assert first == second == PitchEstimate(period=20, voiced=False)

    def test_degenerate_window_never_returns_zero(self, estimator):
        samples = np.full(2000, np.nan)
        estimate = estimator.estimate(samples, 1000, PitchEstimate(60, True))
        assert estimate.period == 40
        assert not estimate.voiced

    def test_quiet_signal_is_unvoiced(self, estimator):
        # Periodic but far below the voicing floor
        samples = pad(make_sine(100.0, 8000, 0.25, amplitude=20.0), 246)
        estimate = estimator.estimate(samples, 1000)
        assert not estimate.voiced

    def test_pure_function(self, estimator, noise):
        samples = pad(noise, 246)
        previous = PitchEstimate(70, True)
        assert estimator.estimate(samples, 2000, previous) == estimator.estimate(samples, 2000, previous)

    def test_noise_period_in_bounds(self, estimator, bounds, noise):
        samples = pad(noise, 246)
        for position in range(300, len(samples) - 300, 150):
            estimate = estimator.estimate(samples, position)
            assert bounds.min_period <= estimate.period <= bounds.max_period

    def test_window_must_fit(self, estimator):
        samples = np.zeros(200, dtype=np.int32)
        with pytest.raises(IndexError):
            estimator.estimate(samples, 50)

    def test_single_precision(self, bounds, sine_100hz):
        estimator = PitchEstimator(bounds, dtype=np.float32)
        estimate = estimator.estimate(pad(sine_100hz, 246), 1200)
        assert estimate == PitchEstimate(period=80, voiced=True)
