"""Per-run state of the render loop, independent of the terminal."""

from cpuecg.models import ColorThresholds, FpsSetting, FrameMetrics
from cpuecg.waveform import WaveformBuffer, WaveformGenerator

START_TICK = 1


class Session:
    """
    All mutable render loop state: FPS, waveform buffer, generator and tick.

    advance() performs one tick's transition so it can be exercised without
    a live terminal.
    """

    def __init__(
        self,
        fps: FpsSetting | None = None,
        thresholds: ColorThresholds | None = None,
    ) -> None:
        self.fps = fps or FpsSetting()
        self.thresholds = thresholds or ColorThresholds()
        self.generator = WaveformGenerator()
        self.buffer = WaveformBuffer()
        self.tick = START_TICK
        self.load = 0.0
        self._seeded = False

    def advance(self, load: float, plot_width: int) -> FrameMetrics:
        """
        Run one tick.

        Args:
            load: Current CPU load percentage.
            plot_width: Visible trace width in columns. Nothing is generated
                while it is zero or negative.
        """
        self.load = load
        if plot_width > 0:
            sample = self.generator.next_point(load, self.tick)
            if not self._seeded:
                self.buffer.seed(plot_width, sample)
                self._seeded = True
            else:
                self.buffer.resize(plot_width)
                self.buffer.append(sample)
        self.tick += 1

        return FrameMetrics(
            load=load,
            fps=self.fps.value,
            phase=self.generator.phase,
            pulse=self.generator.pulse,
            phase_delta=self.generator.phase_delta,
            amplitude=self.generator.amplitude,
            band=self.thresholds.classify(load),
        )

    def faster(self) -> int:
        """Raise FPS one step; returns the new rate."""
        return self.fps.increase()

    def slower(self) -> int:
        """Lower FPS one step; returns the new rate."""
        return self.fps.decrease()
