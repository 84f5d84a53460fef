"""Data models for cpu-ecg."""

import math
from dataclasses import dataclass
from enum import Enum

FPS_DEFAULT = 30
FPS_MIN = 10
FPS_MAX = 60
FPS_STEP = 5


class ColorBand(Enum):
    """Severity class of a load value. Values are terminal color names."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


@dataclass(slots=True, frozen=True)
class ColorThresholds:
    """Load cutoffs (percent) between the color bands."""

    yellow_at: float = 50.0
    red_at: float = 75.0

    def classify(self, load: float) -> ColorBand:
        """Classify a load percentage into a color band."""
        if load < self.yellow_at:
            return ColorBand.GREEN
        if load < self.red_at:
            return ColorBand.YELLOW
        return ColorBand.RED


@dataclass(slots=True)
class FpsSetting:
    """Render loop tick rate, always within [minimum, maximum]."""

    value: int = FPS_DEFAULT
    step: int = FPS_STEP
    minimum: int = FPS_MIN
    maximum: int = FPS_MAX

    def __post_init__(self) -> None:
        self.value = self.clamp(self.value)

    def clamp(self, value: int) -> int:
        return max(self.minimum, min(self.maximum, value))

    @property
    def period(self) -> float:
        """Seconds between ticks."""
        return 1.0 / self.value

    def increase(self) -> int:
        """Raise the rate by one step and return the new value."""
        self.value = self.clamp(self.value + self.step)
        return self.value

    def decrease(self) -> int:
        """Lower the rate by one step and return the new value."""
        self.value = self.clamp(self.value - self.step)
        return self.value


@dataclass(slots=True, frozen=True)
class FrameMetrics:
    """Immutable snapshot of a single tick, shown in the header."""

    load: float  # 0.0 - 100.0
    fps: int
    phase: float
    pulse: float
    phase_delta: float
    amplitude: float
    band: ColorBand

    @property
    def osc_hz(self) -> float:
        """Frequency of the base oscillation at the current rate."""
        if self.phase_delta <= 0.0:
            return 0.0
        return self.phase_delta * self.fps / math.tau
