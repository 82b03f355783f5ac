"""Telemetry subpackage (lightweight).

Exposes the logger factory, timers and Prometheus wrappers.
"""

from .logging import get_logger
from .metrics import Timer
from .prom import Counter, Histogram

__all__ = [
    "get_logger",
    "Timer",
    "Counter",
    "Histogram",
]
