"""Synthetic one-period frames and the two-slot ring that holds them."""

import numpy as np


class Frame:
    """
    One synthetic pitch cycle, looped by a read cursor.

    The samples are a view into a FrameRing slot, so a Frame never owns
    memory of its own.
    """

    def __init__(self, samples: np.ndarray, pos: int = 0):
        self.samples = samples
        self.pos = pos

    @property
    def period(self) -> int:
        return len(self.samples)

    def read(self, count: int) -> np.ndarray:
        """Next `count` samples from the cursor, wrapping at the period."""
        indices = (self.pos + np.arange(count)) % self.period
        self.pos = (self.pos + count) % self.period
        return self.samples[indices]


class FrameRing:
    """Two preallocated frame slots that swap roles every step."""

    def __init__(self, capacity: int, initial_period: int, dtype=np.float64):
        """
        Initialize both slots as silent frames.

        Args:
            capacity: Longest frame the ring can hold (max_period)
            initial_period: Period of the starting frames
            dtype: Float type of the frame buffers
        """
        if not 1 <= initial_period <= capacity:
            raise ValueError(f"Initial period {initial_period} outside [1, {capacity}]")

        self._buffers = np.zeros((2, capacity), dtype=dtype)
        self._frames = [
            Frame(self._buffers[0, :initial_period]),
            Frame(self._buffers[1, :initial_period]),
        ]
        self._current = 0

    @property
    def capacity(self) -> int:
        return self._buffers.shape[1]

    @property
    def current(self) -> Frame:
        return self._frames[self._current]

    @property
    def previous(self) -> Frame:
        return self._frames[1 - self._current]

    def rotate(self) -> None:
        """Current frame becomes previous; the old previous slot is reused."""
        self._current = 1 - self._current

    def claim(self, period: int) -> np.ndarray:
        """Resize the current slot to `period` and return its writable buffer."""
        if not 1 <= period <= self.capacity:
            raise ValueError(f"Period {period} outside [1, {self.capacity}]")
        buffer = self._buffers[self._current, :period]
        self._frames[self._current].samples = buffer
        return buffer


class FrameSynthesizer:
    """Build a frame by fading between two consecutive observed cycles."""

    def __init__(self, dtype=np.float64):
        self.dtype = dtype

    def synthesize(
        self,
        samples: np.ndarray,
        position: int,
        period: int,
        out: np.ndarray = None
    ) -> np.ndarray:
        """
        Blend the cycle ending at `position` with the cycle before it.

        frame[i] = (i/period) * past[i] + (1 - i/period) * present[i]

        The frame starts on the present cycle and ends on the past one, so
        its last sample runs straight into its first when looped.

        Args:
            samples: Padded signal with 2 * period samples before position
            position: Evaluation point
            period: Frame length in samples
            out: Optional preallocated buffer of length period

        Returns:
            The frame (out, when given)
        """
        if position - 2 * period < 0 or position > len(samples):
            raise IndexError(
                f"Frame at {position} with period {period} reads outside the signal"
            )
        if out is None:
            out = np.empty(period, dtype=self.dtype)

        present = samples[position - period:position].astype(self.dtype)
        past = samples[position - 2 * period:position - period].astype(self.dtype)
        ratio = np.arange(period, dtype=self.dtype) / self.dtype(period)

        np.multiply(ratio, past, out=out)
        out += (1 - ratio) * present
        return out

    @staticmethod
    def handoff_position(outgoing_pos: int, step_size: int, period: int) -> int:
        """
        Read cursor for a new frame, phase-aligned with the outgoing one.

        The new frame sits one step further into the input, so the outgoing
        cursor is moved back by the step size and wrapped to the new period.
        """
        return (outgoing_pos - step_size) % period
