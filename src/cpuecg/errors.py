"""Exceptions raised by cpu-ecg."""


class CpuEcgError(Exception):
    """Base class for cpu-ecg errors."""


class SamplingError(CpuEcgError):
    """The CPU utilization counter could not be read."""


class TerminalError(CpuEcgError):
    """The terminal could not be driven."""


class ConfigError(CpuEcgError):
    """The configuration file is malformed or holds invalid values."""
