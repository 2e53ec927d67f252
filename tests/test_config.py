"""Tests for configuration and period bounds."""

import math

import numpy as np
import pytest

from psola_stretch.core.config import (
    LEGACY_CLIP_RANGE, PeriodBounds, StretchConfig, VOICE_RANGES,
)
from psola_stretch.core.errors import ConfigurationError


class TestPeriodBounds:

    @pytest.mark.parametrize("sr, expected", [
        (8000, (20, 123)),
        (16000, (40, 246)),
        (44100, (110, 678)),
    ])
    def test_default_voice_range(self, sr, expected):
        bounds = PeriodBounds.from_sample_rate(sr, 65, 400)
        assert (bounds.min_period, bounds.max_period) == expected

    def test_guard_covers_two_periods(self):
        bounds = PeriodBounds.from_sample_rate(8000, 65, 400)
        assert bounds.guard == 246

    def test_contains(self):
        bounds = PeriodBounds(20, 123)
        assert 20 in bounds
        assert 123 in bounds
        assert 0 not in bounds
        assert 124 not in bounds

    def test_sample_rate_too_low(self):
        with pytest.raises(ConfigurationError):
            PeriodBounds.from_sample_rate(200, 65, 400)

    def test_non_positive_sample_rate(self):
        with pytest.raises(ConfigurationError):
            PeriodBounds.from_sample_rate(0, 65, 400)


class TestStretchConfig:

    def test_defaults(self):
        config = StretchConfig(speed=1.5).validate()
        assert (config.min_voice_freq, config.max_voice_freq) == (65.0, 400.0)
        assert config.step_policy == 'full'
        assert config.dtype is np.float64
        assert config.clip_range == (-32768, 32767)

    def test_low_voice_preset(self):
        config = StretchConfig.for_voice('low', 2.0)
        assert (config.min_voice_freq, config.max_voice_freq) == VOICE_RANGES['low'] == (65.0, 135.0)
        assert config.speed == 2.0

    def test_preset_passes_options(self):
        config = StretchConfig.for_voice('default', 1.0, precision='single', clip_range=LEGACY_CLIP_RANGE)
        assert config.dtype is np.float32
        assert config.clip_range == (-32767, 32767)

    def test_unknown_preset(self):
        with pytest.raises(ConfigurationError):
            StretchConfig.for_voice('soprano', 1.0)

    @pytest.mark.parametrize("speed", [0.0, -1.0, math.nan, math.inf])
    def test_invalid_speed(self, speed):
        with pytest.raises(ConfigurationError):
            StretchConfig(speed=speed).validate()

    @pytest.mark.parametrize("kwargs", [
        {'min_voice_freq': 0},
        {'min_voice_freq': 500, 'max_voice_freq': 400},
        {'step_policy': 'quarter'},
        {'precision': 'half'},
        {'clip_range': (100, -100)},
        {'clip_range': (-40000, 40000)},
    ])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ConfigurationError):
            StretchConfig(speed=1.0, **kwargs).validate()

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            StretchConfig(speed=-2).validate()

    def test_step_size(self):
        assert StretchConfig().step_size(80) == 80
        assert StretchConfig(step_policy='half').step_size(80) == 40
        assert StretchConfig(step_policy='half').step_size(1) == 1

    def test_bounds_for(self):
        bounds = StretchConfig.for_voice('low', 1.0).bounds_for(8000)
        assert (bounds.min_period, bounds.max_period) == (59, 123)
