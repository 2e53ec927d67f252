"""Shared fixtures: synthetic test signals."""

import numpy as np
import pytest


def make_sine(freq=100.0, sr=8000, seconds=0.5, amplitude=10000.0):
    """int16 sine wave."""
    n = np.arange(int(sr * seconds))
    return np.rint(amplitude * np.sin(2 * np.pi * freq * n / sr)).astype(np.int16)


def pad(samples, guard):
    """Zero-pad a signal the way the engine does."""
    return np.pad(samples.astype(np.int32), (guard, guard), mode='constant')


@pytest.fixture
def sine_100hz():
    """100 Hz sine at 8 kHz: exactly 80 samples per period."""
    return make_sine(100.0, 8000, 0.5)


@pytest.fixture
def noise():
    rng = np.random.default_rng(1234)
    return rng.integers(-8000, 8000, size=4000).astype(np.int16)
