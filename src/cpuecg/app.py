"""cpu-ecg - Main Textual application."""

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.logging import TextualHandler
from textual.timer import Timer
from textual.widgets import Footer, Static

from cpuecg.config import EcgConfig, load_config
from cpuecg.errors import CpuEcgError, SamplingError, TerminalError
from cpuecg.models import ColorBand, FrameMetrics
from cpuecg.sampler import LoadSampler
from cpuecg.session import Session
from cpuecg.waveform import SIGNAL_MAX, SIGNAL_MIN

logger = logging.getLogger(__name__)

LEFT_GUTTER = 5
GRID_ROW_STEP = 4
GRID_COL_STEP = 6
MIN_PLOT_HEIGHT = 4
MIN_PLOT_WIDTH = 10

TRACE_POINT = "*"
TRACE_LINK = "|"
GRID_DOT = "."


def format_header(metrics: FrameMetrics) -> str:
    """Format the one-line status header."""
    return (
        f"CPU ECG  load: {metrics.load:5.1f}%  fps: {metrics.fps:2d}  "
        f"osc: {metrics.osc_hz:4.2f}Hz  phase: {metrics.phase:5.1f}  "
        f"pulse: {metrics.pulse:4.2f}"
    )


def sample_row(sample: float, plot_height: int) -> int:
    """Map a displacement to a plot row, 0 being the top."""
    normalized = (sample - SIGNAL_MIN) / (SIGNAL_MAX - SIGNAL_MIN)
    row = round((1.0 - normalized) * (plot_height - 1))
    return max(0, min(plot_height - 1, row))


def gutter_label(row: int, plot_height: int) -> str:
    """Axis label for a plot row, blank between the labelled rows."""
    if row == 0:
        return " 1.0|"
    if row == plot_height // 2:
        return " 0.0|"
    if row == plot_height - 1:
        return "-1.0|"
    return " " * LEFT_GUTTER


def render_trace(samples: Sequence[float], width: int, height: int, band: ColorBand) -> str:
    """
    Render the trace as Rich markup.

    Grid and gutter are dim; trace characters take the band color. Returns
    an empty string when the area is too small to plot.
    """
    plot_width = width - LEFT_GUTTER
    plot_height = height
    if plot_width < MIN_PLOT_WIDTH or plot_height < MIN_PLOT_HEIGHT:
        return ""

    cells = [[" "] * plot_width for _ in range(plot_height)]
    for row in range(0, plot_height, GRID_ROW_STEP):
        for col in range(0, plot_width, GRID_COL_STEP):
            cells[row][col] = GRID_DOT
    traced = [[False] * plot_width for _ in range(plot_height)]

    prev_y: int | None = None
    for x, sample in enumerate(samples[:plot_width]):
        y = sample_row(sample, plot_height)
        cells[y][x] = TRACE_POINT
        traced[y][x] = True
        if prev_y is not None and prev_y != y:
            for row in range(min(prev_y, y) + 1, max(prev_y, y)):
                cells[row][x] = TRACE_LINK
                traced[row][x] = True
        prev_y = y

    color = band.value
    lines = []
    for row in range(plot_height):
        parts = [f"[dim]{gutter_label(row, plot_height)}[/dim]"]
        start = 0
        # Emit runs of trace / background cells with one markup tag each
        for col in range(1, plot_width + 1):
            if col < plot_width and traced[row][col] == traced[row][start]:
                continue
            run = "".join(cells[row][start:col])
            if traced[row][start]:
                parts.append(f"[{color}]{run}[/{color}]")
            else:
                parts.append(f"[dim]{run}[/dim]")
            start = col
        lines.append("".join(parts))
    return "\n".join(lines)


class EcgHeader(Static):
    """Header line showing load, FPS and oscillator state."""

    DEFAULT_CSS = """
    EcgHeader {
        height: 1;
        background: $surface;
    }
    """

    def show_metrics(self, metrics: FrameMetrics) -> None:
        self.update(format_header(metrics))


class EcgTrace(Static):
    """Plot area for the scrolling trace."""

    DEFAULT_CSS = """
    EcgTrace {
        height: 1fr;
    }
    """

    @property
    def plot_width(self) -> int:
        """Columns available for samples once the gutter is taken."""
        return max(0, self.content_size.width - LEFT_GUTTER)

    def show_trace(self, samples: Sequence[float], band: ColorBand) -> None:
        size = self.content_size
        self.update(render_trace(samples, size.width, size.height, band))


class CpuEcgApp(App):
    """Main cpu-ecg application."""

    TITLE = "cpu-ecg"
    SUB_TITLE = "CPU load as an ECG trace"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        Binding("escape", "quit", "Quit", show=False, priority=True),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
        ("plus,equals_sign", "faster", "FPS +"),
        ("minus,underscore", "slower", "FPS -"),
    ]

    def __init__(
        self,
        config: EcgConfig | None = None,
        sampler: LoadSampler | None = None,
    ) -> None:
        """Initialize the CpuEcgApp."""
        super().__init__()
        config = config or EcgConfig()
        self.session = Session(config.fps_setting(), config.thresholds())
        self._sampler = sampler or LoadSampler()
        self._timer: Timer | None = None

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield EcgHeader("CPU ECG", id="ecg-header")
        yield EcgTrace(id="ecg-trace")
        yield Footer()

    def on_mount(self) -> None:
        """Start ticking once the app is mounted."""
        self._schedule()

    def on_unmount(self) -> None:
        """Stop ticking once the app is torn down."""
        self._stop_timer()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _schedule(self) -> None:
        """(Re)arm the tick timer at the current FPS."""
        self._stop_timer()
        self._timer = self.set_interval(self.session.fps.period, self.advance)

    def advance(self) -> None:
        """Run one tick: sample, extend the trace and redraw."""
        try:
            load = self._sampler.sample()
        except SamplingError as exc:
            logger.error("Giving up: %s", exc)
            self._stop_timer()
            self.exit(return_code=1, message=f"cpu-ecg: {exc}")
            return

        try:
            trace = self.query_one(EcgTrace)
            header = self.query_one(EcgHeader)
        except NoMatches:
            # Widgets already unmounted during shutdown
            self._stop_timer()
            return

        metrics = self.session.advance(load, trace.plot_width)
        trace.show_trace(self.session.buffer.samples, metrics.band)
        header.show_metrics(metrics)

    def action_faster(self) -> None:
        """Raise the tick rate one step."""
        fps = self.session.faster()
        logger.debug("FPS raised to %d", fps)
        self._schedule()

    def action_slower(self) -> None:
        """Lower the tick rate one step."""
        fps = self.session.slower()
        logger.debug("FPS lowered to %d", fps)
        self._schedule()

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._stop_timer()
        self.exit()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="cpu-ecg",
        description="Show CPU load as a scrolling ECG trace.",
        epilog="Keys: q/Esc quit, +/- change FPS",
    )
    parser.add_argument("--fps", type=int, help="Initial frames per second (10-60).")
    parser.add_argument("--config", type=Path, help="JSON settings file.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )
    return parser.parse_args(argv)


def run(config: EcgConfig) -> int:
    """
    Run the app until quit and return its exit code.

    Raises:
        SamplingError: The CPU counter is unavailable at startup.
        TerminalError: The terminal could not be driven.
    """
    app = CpuEcgApp(config=config, sampler=LoadSampler())
    try:
        app.run()
    except OSError as exc:
        raise TerminalError(f"cannot drive terminal: {exc}") from exc
    return app.return_code or 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for cpu-ecg application."""
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, handlers=[TextualHandler()])

    try:
        config = load_config(args.config, fps=args.fps)
        return run(config)
    except CpuEcgError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
