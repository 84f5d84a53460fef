"""cpu-ecg - CPU load rendered as a scrolling ECG trace."""

__version__ = "0.1.0"
