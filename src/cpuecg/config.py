"""Configuration loading for cpu-ecg."""

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from cpuecg.errors import ConfigError
from cpuecg.models import FPS_DEFAULT, FPS_STEP, ColorThresholds, FpsSetting

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EcgConfig:
    """Settings read from the config file and command line."""

    fps: int = FPS_DEFAULT
    fps_step: int = FPS_STEP
    yellow_at: float = 50.0
    red_at: float = 75.0

    def validate(self) -> "EcgConfig":
        """Return self, or raise ConfigError on inconsistent values."""
        if self.fps_step < 1:
            raise ConfigError(f"fps_step must be at least 1, got {self.fps_step}")
        if not 0.0 <= self.yellow_at <= self.red_at <= 100.0:
            raise ConfigError(
                f"thresholds must satisfy 0 <= yellow_at <= red_at <= 100, "
                f"got yellow_at={self.yellow_at} red_at={self.red_at}"
            )
        return self

    def fps_setting(self) -> FpsSetting:
        """Initial FPS setting built from these values."""
        return FpsSetting(value=self.fps, step=self.fps_step)

    def thresholds(self) -> ColorThresholds:
        """Color band cutoffs built from these values."""
        return ColorThresholds(yellow_at=self.yellow_at, red_at=self.red_at)


_TYPES: dict[str, type] = {"fps": int, "fps_step": int, "yellow_at": float, "red_at": float}


def _coerce(key: str, value: Any) -> Any:
    kind = _TYPES[key]
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    if kind is int and not float(value).is_integer():
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return kind(value)


def load_config(path: Path | None = None, **overrides: Any) -> EcgConfig:
    """
    Build the configuration from an optional JSON file and overrides.

    A missing file yields the defaults. Overrides whose value is None are
    ignored, so argparse results can be passed straight through.

    Raises:
        ConfigError: The file is not a JSON object or holds invalid values.
    """
    values: dict[str, Any] = {}

    if path is not None and path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                obj = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"cannot read {path}: {exc}") from exc
        if not isinstance(obj, dict):
            raise ConfigError(f"{path} must contain a JSON object")
        for key, value in obj.items():
            if key not in _TYPES:
                logger.warning("Ignoring unknown config key %r in %s", key, path)
                continue
            values[key] = _coerce(key, value)
    elif path is not None:
        logger.info("Config file %s not found, using defaults", path)

    known = {f.name for f in fields(EcgConfig)}
    for key, value in overrides.items():
        if value is not None and key in known:
            values[key] = _coerce(key, value)

    return replace(EcgConfig(), **values).validate()
