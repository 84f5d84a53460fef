"""ECG waveform generation and the scrolling sample buffer."""

import math
from collections import deque

SIGNAL_MIN = -1.0
SIGNAL_MAX = 1.0

PHASE_DELTA_BASE = 0.25
PHASE_DELTA_LOAD_SCALE = 0.7
# Multiple of both 2*pi and 2*pi / LOW_LOAD_PHASE_SCALE
PHASE_WRAP = 10 * math.tau

MIN_AMPLITUDE = 0.1
MAX_AMPLITUDE = 0.7

PULSE_INTERVAL_MAX = 48  # ticks between beats near idle
PULSE_INTERVAL_MIN = 12  # ticks between beats at full load
PULSE_DECAY = 0.65
PULSE_GAIN = 0.9

LOW_LOAD_THRESHOLD = 0.2
LOW_LOAD_PHASE_SCALE = 0.7


def load_fraction(load: float) -> float:
    """Convert a load percentage to a fraction in [0, 1]."""
    return max(0.0, min(1.0, load / 100.0))


def clamp_sample(value: float) -> float:
    """Clamp a displacement to the drawable range."""
    return max(SIGNAL_MIN, min(SIGNAL_MAX, value))


def amplitude_for(load: float) -> float:
    """Envelope of the base oscillation for a load percentage."""
    return MIN_AMPLITUDE + (MAX_AMPLITUDE - MIN_AMPLITUDE) * load_fraction(load)


def pulse_interval(load: float) -> int:
    """Ticks between heartbeat spikes; shorter under higher load."""
    span = PULSE_INTERVAL_MAX - PULSE_INTERVAL_MIN
    return round(PULSE_INTERVAL_MAX - span * load_fraction(load))


class WaveformGenerator:
    """
    Produces one displacement in [-1, 1] per tick.

    The trace is a sine whose amplitude and speed grow with load, plus a
    decaying spike that fires every pulse_interval(load) ticks.
    """

    def __init__(self) -> None:
        self.phase = 0.0
        self.phase_delta = PHASE_DELTA_BASE
        self.pulse = 0.0
        self.amplitude = MIN_AMPLITUDE
        self._last_beat = 0

    def next_point(self, load: float, tick: int) -> float:
        """Advance the phase and return the displacement for this tick."""
        fraction = load_fraction(load)
        self.phase_delta = PHASE_DELTA_BASE + fraction * PHASE_DELTA_LOAD_SCALE

        if fraction > 0.0 and tick - self._last_beat >= pulse_interval(load):
            self.pulse = fraction
            self._last_beat = tick
        self.pulse *= PULSE_DECAY

        phase = self.phase
        if fraction < LOW_LOAD_THRESHOLD:
            phase *= LOW_LOAD_PHASE_SCALE

        envelope = amplitude_for(load)
        spike = self.pulse * PULSE_GAIN
        self.amplitude = min(SIGNAL_MAX, envelope + spike)
        sample = clamp_sample(envelope * math.sin(phase) + spike)

        self.phase = (self.phase + self.phase_delta) % PHASE_WRAP
        return sample


class WaveformBuffer:
    """Sliding window of displacements, one per plot column."""

    def __init__(self, capacity: int = 0) -> None:
        self._samples: deque[float] = deque(maxlen=max(0, capacity))

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def capacity(self) -> int:
        """Maximum number of points the buffer holds."""
        return self._samples.maxlen or 0

    @property
    def is_empty(self) -> bool:
        return not self._samples

    @property
    def samples(self) -> list[float]:
        """Points oldest first (returns a copy)."""
        return list(self._samples)

    def seed(self, capacity: int, value: float) -> None:
        """Fill the whole window with a single value."""
        self._samples = deque([value] * capacity, maxlen=capacity)

    def resize(self, capacity: int) -> None:
        """
        Change the capacity.

        Growing pads with the newest value; shrinking drops the oldest points.
        """
        capacity = max(0, capacity)
        if capacity == self.capacity:
            return
        points = list(self._samples)
        if points and len(points) < capacity:
            points.extend([points[-1]] * (capacity - len(points)))
        self._samples = deque(points, maxlen=capacity)

    def append(self, value: float) -> None:
        """Add a point, evicting the oldest when full."""
        self._samples.append(value)
