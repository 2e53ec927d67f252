"""Audio loading, saving, and channel utilities."""

import logging
from pathlib import Path
from typing import List, Tuple, Optional, Union

import numpy as np
import soundfile as sf

from ..core.errors import InputError

logger = logging.getLogger(__name__)


class AudioAnalyzer:
    """Load and save 16-bit audio and split it into channels."""

    # Supported formats
    SUPPORTED_FORMATS = {'.wav', '.mp3', '.flac', '.ogg', '.m4a', '.aac'}

    @staticmethod
    def load(path: Union[str, Path]) -> Tuple[np.ndarray, int]:
        """
        Load audio file as 16-bit samples (supports WAV, MP3, FLAC, OGG, etc.).

        Args:
            path: Path to audio file

        Returns:
            (int16 array of shape (frames,) or (frames, channels), sample_rate)
        """
        path = Path(path)

        if path.suffix.lower() not in AudioAnalyzer.SUPPORTED_FORMATS:
            logger.debug("Unrecognized extension %r, trying anyway", path.suffix)

        try:
            # Try soundfile first (faster, supports most formats)
            audio, sr = sf.read(str(path), dtype='int16')
        except Exception as sf_error:
            # Fallback to librosa for MP3 and other formats
            try:
                import librosa
            except ImportError:
                raise InputError(f"Cannot load audio file: {path}. Error: {sf_error}") from sf_error

            try:
                audio, sr = librosa.load(str(path), sr=None, mono=False)
            except Exception as e:
                raise InputError(f"Cannot load audio file: {path}. Error: {e}") from e

            # librosa returns (samples,) for mono or (channels, samples)
            if audio.ndim > 1:
                audio = audio.T
            audio = AudioAnalyzer.to_int16(audio)

        if audio.size == 0:
            raise InputError(f"Audio file is empty: {path}")

        return audio, int(sr)

    @staticmethod
    def save(
        audio: np.ndarray,
        path: Union[str, Path],
        sr: int,
        format: Optional[str] = None
    ):
        """
        Save 16-bit audio to file (supports WAV, MP3, FLAC, OGG).

        Args:
            audio: int16 samples, (frames,) or (frames, channels)
            path: Output path
            sr: Sample rate
            format: Override format (e.g., 'WAV', 'FLAC')
        """
        path = Path(path)
        ext = path.suffix.lower()

        if audio.dtype != np.int16:
            audio = AudioAnalyzer.to_int16(audio)

        if ext == '.mp3':
            AudioAnalyzer._save_mp3(audio, path, sr)
        elif ext in {'.wav', '.flac'}:
            sf.write(str(path), audio, sr, subtype='PCM_16', format=format)
        elif ext == '.ogg':
            sf.write(str(path), audio, sr, format=format)
        else:
            # Default to WAV
            sf.write(str(path), audio, sr, subtype='PCM_16', format='WAV')

    @staticmethod
    def _save_mp3(audio: np.ndarray, path: Path, sr: int, bitrate: str = '192k'):
        """Save as MP3 using pydub (needs ffmpeg)."""
        try:
            from pydub import AudioSegment
        except ImportError:
            raise ImportError(
                "pydub not installed for MP3 export. "
                "Install with: pip install psola-stretch[mp3]"
            )

        channels = 1 if audio.ndim == 1 else audio.shape[1]
        segment = AudioSegment(
            np.ascontiguousarray(audio).tobytes(),
            frame_rate=sr,
            sample_width=2,
            channels=channels
        )
        segment.export(str(path), format='mp3', bitrate=bitrate)

    @staticmethod
    def get_duration(audio: np.ndarray, sr: int) -> float:
        """Get audio duration in seconds."""
        return audio.shape[0] / sr

    @staticmethod
    def get_info(path: Union[str, Path]) -> dict:
        """
        Get audio file information without loading full audio.

        Returns:
            dict with duration, sample_rate, channels, frames, format
        """
        path = Path(path)

        try:
            info = sf.info(str(path))
            return {
                'duration': info.duration,
                'sample_rate': info.samplerate,
                'channels': info.channels,
                'frames': info.frames,
                'format': info.format,
                'subtype': info.subtype,
            }
        except Exception:
            # Fallback: load and analyze
            audio, sr = AudioAnalyzer.load(path)
            return {
                'duration': AudioAnalyzer.get_duration(audio, sr),
                'sample_rate': sr,
                'channels': 1 if audio.ndim == 1 else audio.shape[1],
                'frames': audio.shape[0],
                'format': path.suffix.upper().strip('.'),
                'subtype': None,
            }

    @staticmethod
    def to_int16(audio: np.ndarray) -> np.ndarray:
        """Convert float audio in [-1, 1] to int16, clipping overshoot."""
        audio = np.asarray(audio)
        if audio.dtype == np.int16:
            return audio
        if np.issubdtype(audio.dtype, np.integer):
            return np.clip(audio, -32768, 32767).astype(np.int16)
        scaled = np.rint(audio.astype(np.float64) * 32767)
        return np.clip(scaled, -32768, 32767).astype(np.int16)

    @staticmethod
    def split_channels(audio: np.ndarray) -> List[np.ndarray]:
        """Split (frames, channels) audio into a list of 1-D channels."""
        if audio.ndim == 1:
            return [audio]
        if audio.ndim != 2:
            raise InputError(f"Expected 1-D or 2-D audio, got shape {audio.shape}")
        return [audio[:, c] for c in range(audio.shape[1])]

    @staticmethod
    def interleave(channels: List[np.ndarray], like: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Join per-channel outputs back into (frames, channels).

        Channels are trimmed to the shortest one. A mono result stays 1-D
        unless `like` is 2-D.
        """
        length = min(len(c) for c in channels)
        if len(channels) == 1 and (like is None or like.ndim == 1):
            return channels[0][:length]
        return np.column_stack([c[:length] for c in channels])

    @staticmethod
    def get_rms_energy(audio: np.ndarray) -> float:
        """Get overall RMS energy."""
        audio = audio.astype(np.float64)
        return float(np.sqrt(np.mean(audio ** 2)))
