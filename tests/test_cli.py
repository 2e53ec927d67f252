"""Tests for the command line interface."""

import numpy as np
import pytest
import soundfile as sf
from click.testing import CliRunner

from psola_stretch.cli import cli, EXIT_INVARIANT
from psola_stretch.core.errors import InvariantViolation
from psola_stretch.core.stretcher import PsolaStretcher


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def wav_file(tmp_path, sine_100hz):
    path = tmp_path / "speech.wav"
    sf.write(str(path), sine_100hz, 8000, subtype='PCM_16')
    return path


class TestAdjust:

    def test_speed_up(self, runner, wav_file, tmp_path, sine_100hz):
        out = tmp_path / "fast.wav"
        result = runner.invoke(cli, ['adjust', '2.0', str(wav_file), str(out)])
        assert result.exit_code == 0, result.output
        audio, sr = sf.read(str(out), dtype='int16')
        assert sr == 8000
        assert abs(len(audio) - len(sine_100hz) / 2) <= 130

    def test_verbose_with_options(self, runner, wav_file, tmp_path):
        out = tmp_path / "slow.wav"
        result = runner.invoke(cli, [
            'adjust', '0.5', str(wav_file), str(out),
            '--voice', 'low', '--step', 'half', '--precision', 'single', '--legacy-clip', '-v',
        ])
        assert result.exit_code == 0, result.output
        assert "Saved" in result.output
        assert out.exists()

    def test_zero_speed_is_usage_error(self, runner, wav_file, tmp_path):
        out = tmp_path / "out.wav"
        result = runner.invoke(cli, ['adjust', '0', str(wav_file), str(out)])
        assert result.exit_code == 2
        assert not out.exists()

    def test_inverted_frequency_bounds(self, runner, wav_file, tmp_path):
        result = runner.invoke(cli, [
            'adjust', '1.0', str(wav_file), str(tmp_path / "out.wav"),
            '--min-freq', '500', '--max-freq', '100',
        ])
        assert result.exit_code == 2

    def test_voice_range_too_high_for_sample_rate(self, runner, wav_file, tmp_path):
        out = tmp_path / "out.wav"
        result = runner.invoke(cli, ['adjust', '1.0', str(wav_file), str(out), '--max-freq', '10000'])
        assert result.exit_code == 2
        assert "Invalid period bounds" in result.output
        assert not out.exists()

    def test_missing_arguments(self, runner, wav_file):
        result = runner.invoke(cli, ['adjust', '2.0', str(wav_file)])
        assert result.exit_code == 2

    def test_empty_input(self, runner, tmp_path):
        src = tmp_path / "empty.wav"
        out = tmp_path / "out.wav"
        sf.write(str(src), np.zeros(0, dtype=np.int16), 8000, subtype='PCM_16')
        result = runner.invoke(cli, ['adjust', '2.0', str(src), str(out)])
        assert result.exit_code == 1
        assert not out.exists()

    def test_invariant_violation_exit_code(self, runner, wav_file, tmp_path, monkeypatch):
        def broken(self, input_path, output_path):
            raise InvariantViolation("ratio out of range")

        monkeypatch.setattr(PsolaStretcher, "stretch_file", broken)
        result = runner.invoke(cli, ['adjust', '2.0', str(wav_file), str(tmp_path / "out.wav")])
        assert result.exit_code == EXIT_INVARIANT


class TestInfo:

    def test_info(self, runner, wav_file):
        result = runner.invoke(cli, ['info', str(wav_file)])
        assert result.exit_code == 0, result.output
        assert "Length = 4000, sample rate = 8000 Hz" in result.output
        assert "20-123 samples" in result.output

    def test_info_low_voice(self, runner, wav_file):
        result = runner.invoke(cli, ['info', str(wav_file), '--voice', 'low'])
        assert "59-123 samples" in result.output

    def test_info_sample_rate_too_low_for_voice(self, runner, tmp_path):
        path = tmp_path / "low_rate.wav"
        sf.write(str(path), np.zeros(100, dtype=np.int16), 100, subtype='PCM_16')
        result = runner.invoke(cli, ['info', str(path)])
        assert result.exit_code == 2
        assert "Invalid period bounds" in result.output
