"""Stretch report for tracking what the engine did."""

from dataclasses import dataclass, field
from typing import List, Dict, Any


@dataclass
class StretchReport:
    """Summary of one stretch run."""

    speed: float = 1.0
    sample_rate: int = 0
    channels: int = 1

    # Frame counts (samples per channel)
    input_frames: int = 0
    output_frames: int = 0

    # Engine statistics, summed over channels
    steps: int = 0
    voiced_steps: int = 0
    min_period: int = 0
    max_period: int = 0
    mean_period: float = 0.0
    clipped_samples: int = 0

    warnings: List[str] = field(default_factory=list)

    @property
    def input_duration(self) -> float:
        """Input duration in seconds."""
        if self.sample_rate == 0:
            return 0.0
        return self.input_frames / self.sample_rate

    @property
    def output_duration(self) -> float:
        """Output duration in seconds."""
        if self.sample_rate == 0:
            return 0.0
        return self.output_frames / self.sample_rate

    @property
    def duration_ratio(self) -> float:
        """Output length over input length (ideally 1 / speed)."""
        if self.input_frames == 0:
            return 0.0
        return self.output_frames / self.input_frames

    @property
    def voiced_ratio(self) -> float:
        """Fraction of steps classified voiced."""
        if self.steps == 0:
            return 0.0
        return self.voiced_steps / self.steps

    def add_periods(self, periods: List[int], voiced: List[bool]):
        """Fold one channel's per-step estimates into the report."""
        if not periods:
            return
        total = self.mean_period * self.steps + sum(periods)
        self.min_period = min(periods) if self.steps == 0 else min(self.min_period, min(periods))
        self.max_period = max(self.max_period, max(periods))
        self.steps += len(periods)
        self.voiced_steps += sum(voiced)
        self.mean_period = total / self.steps

    def add_warning(self, message: str):
        """Add a warning message."""
        self.warnings.append(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "speed": self.speed,
            "sample_rate": self.sample_rate,
            "channels": self.channels,
            "input_frames": self.input_frames,
            "output_frames": self.output_frames,
            "input_duration": self.input_duration,
            "output_duration": self.output_duration,
            "duration_ratio": self.duration_ratio,
            "steps": self.steps,
            "voiced_ratio": self.voiced_ratio,
            "min_period": self.min_period,
            "max_period": self.max_period,
            "mean_period": self.mean_period,
            "clipped_samples": self.clipped_samples,
            "warnings": self.warnings,
        }

    def __str__(self) -> str:
        lines = [
            f"Duration: {self.input_duration:.3f}s -> {self.output_duration:.3f}s (speed {self.speed:g}x)",
            f"Steps: {self.steps} ({self.voiced_ratio * 100:.0f}% voiced)",
            f"Period: {self.min_period}-{self.max_period} samples (mean {self.mean_period:.1f})",
        ]
        if self.warnings:
            lines.append(f"Warnings: {len(self.warnings)}")
        return "\n".join(lines)
