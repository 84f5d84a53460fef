"""CPU load sampling for cpu-ecg."""

import logging
import math
from collections.abc import Callable

import psutil

from cpuecg.errors import SamplingError

logger = logging.getLogger(__name__)

# Failures a cpu_percent() call can surface on an unreadable counter
READ_ERRORS = (psutil.Error, OSError, RuntimeError)


class LoadSampler:
    """
    Reads overall CPU utilization as a percentage in [0, 100].

    Uses psutil's non-blocking cpu_percent(), which reports usage since the
    previous call. A failed read falls back to the last known good value;
    with no such value the failure is raised as SamplingError.
    """

    def __init__(self, reader: Callable[..., float] = psutil.cpu_percent) -> None:
        """
        Initialize the LoadSampler.

        Args:
            reader: Callable with psutil.cpu_percent's signature.

        Raises:
            SamplingError: The counter could not be primed.
        """
        self._reader = reader
        self._last: float | None = None
        # Prime the counter (first call returns 0.0)
        try:
            self._reader(interval=None)
        except READ_ERRORS as exc:
            raise SamplingError(f"CPU counter unavailable: {exc}") from exc

    @property
    def last(self) -> float | None:
        """Last successfully read load, if any."""
        return self._last

    def sample(self) -> float:
        """Read the current load percentage."""
        try:
            value = float(self._reader(interval=None))
            if not math.isfinite(value):
                raise ValueError(f"non-finite reading {value!r}")
        except (*READ_ERRORS, ValueError, TypeError) as exc:
            if self._last is None:
                raise SamplingError(f"CPU counter unreadable: {exc}") from exc
            logger.warning("CPU read failed (%s), holding %.1f%%", exc, self._last)
            return self._last

        self._last = max(0.0, min(100.0, value))
        return self._last
