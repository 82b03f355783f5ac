"""Timing helper that can feed a Prometheus histogram."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .prom import Histogram


@dataclass
class Timer:
    name: str
    histogram: Optional["Histogram"] = None
    labels: Dict[str, str] = field(default_factory=dict)
    start: float | None = None
    elapsed: float = 0.0

    def __enter__(self):  # noqa: ANN001
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):  # noqa: ANN001, ANN201
        self.elapsed = time.perf_counter() - (self.start or time.perf_counter())
        if self.histogram is not None:
            self.histogram.observe(self.elapsed, **self.labels)
        return False
