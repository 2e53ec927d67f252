"""Main PsolaStretcher API - the public interface."""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

from .config import StretchConfig
from .engine import PlaybackEngine
from .errors import InputError
from .report import StretchReport
from ..analyzer.audio import AudioAnalyzer

logger = logging.getLogger(__name__)


class PsolaStretcher:
    """
    Change playback speed while preserving pitch.

    Drives one PlaybackEngine per channel over a fully loaded signal and
    re-interleaves the results.
    """

    def __init__(
        self,
        speed: float = 1.0,
        min_voice_freq: float = 65.0,
        max_voice_freq: float = 400.0,
        config: Optional[StretchConfig] = None,
    ):
        """
        Initialize the stretcher.

        Args:
            speed: Playback speed (>1 = faster/shorter, <1 = slower/longer)
            min_voice_freq: Lowest expected pitch (Hz)
            max_voice_freq: Highest expected pitch (Hz)
            config: Full configuration; overrides the other arguments
        """
        self.config = config or StretchConfig(
            speed=speed,
            min_voice_freq=min_voice_freq,
            max_voice_freq=max_voice_freq,
        )
        self.config.validate()

    @staticmethod
    def run_all(engine: PlaybackEngine) -> np.ndarray:
        """Step the engine until the input is exhausted."""
        while not engine.finished:
            engine.step()
        return engine.output()

    def stretch(
        self,
        samples: np.ndarray,
        sample_rate: int
    ) -> Tuple[np.ndarray, StretchReport]:
        """
        Stretch an in-memory signal.

        Args:
            samples: int16 audio, shape (frames,) or (frames, channels);
                float audio in [-1, 1] is converted first
            sample_rate: Sample rate in Hz

        Returns:
            (stretched_samples, report) with the input's channel layout
        """
        samples = np.asarray(samples)
        if samples.size == 0:
            raise InputError("Cannot stretch an empty signal")
        if np.issubdtype(samples.dtype, np.floating):
            samples = AudioAnalyzer.to_int16(samples)

        channels = AudioAnalyzer.split_channels(samples)

        report = StretchReport(
            speed=self.config.speed,
            sample_rate=sample_rate,
            channels=len(channels),
            input_frames=len(channels[0]),
        )

        logger.info(
            "Length = %d, sample rate = %d Hz, channels = %d, speed = %g",
            report.input_frames, sample_rate, report.channels, self.config.speed
        )

        outputs = []
        for index, channel in enumerate(channels):
            engine = PlaybackEngine(channel, sample_rate, self.config)
            outputs.append(self.run_all(engine))

            report.add_periods(
                [e.period for e in engine.estimates],
                [e.voiced for e in engine.estimates],
            )
            report.clipped_samples += engine.clipped_samples
            logger.debug(
                "Channel %d: %d steps, %d samples",
                index, len(engine.estimates), len(outputs[-1])
            )

        if report.clipped_samples:
            message = f"{report.clipped_samples} samples clipped to {self.config.clip_range}"
            logger.warning("%s", message)
            report.add_warning(message)

        result = AudioAnalyzer.interleave(outputs, like=samples)
        report.output_frames = result.shape[0]
        return result, report

    def stretch_file(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path]
    ) -> Tuple[np.ndarray, StretchReport]:
        """
        Load, stretch and save an audio file.

        Nothing is written when loading or stretching fails.
        """
        samples, sr = AudioAnalyzer.load(input_path)
        result, report = self.stretch(samples, sr)
        AudioAnalyzer.save(result, output_path, sr)
        return result, report
