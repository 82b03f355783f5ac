"""Prometheus metric wrappers.

Created metrics are cached by name so wrappers can be constructed several
times (e.g. one client per test) without duplicate registration errors.
"""
from __future__ import annotations

from typing import Optional, Sequence

from prometheus_client import Counter as _PCounter, Histogram as _PHist

_COUNTERS: dict[str, _PCounter] = {}
_HISTS: dict[str, _PHist] = {}


class Counter:
    def __init__(self, name: str, desc: str = "", labelnames: Sequence[str] = ()) -> None:
        self._name = name
        if name not in _COUNTERS:
            _COUNTERS[name] = _PCounter(name, desc, list(labelnames))
        self._c = _COUNTERS[name]

    def inc(self, amt: float = 1.0, **labels: str) -> None:
        if labels:
            self._c.labels(**labels).inc(amt)
        else:
            self._c.inc(amt)


class Histogram:
    def __init__(
        self,
        name: str,
        desc: str = "",
        labelnames: Sequence[str] = (),
        buckets: Optional[list[float]] = None,
    ) -> None:
        self._name = name
        if name not in _HISTS:
            if buckets is not None:
                _HISTS[name] = _PHist(name, desc, list(labelnames), buckets=buckets)
            else:
                _HISTS[name] = _PHist(name, desc, list(labelnames))
        self._h = _HISTS[name]

    def observe(self, val: float, **labels: str) -> None:
        if labels:
            self._h.labels(**labels).observe(val)
        else:
            self._h.observe(val)


# Client-side RPC metrics, shared by every Client instance.
RPC_TOTAL = Counter(
    "cfcopilot_client_rpcs",
    "Copilot RPCs issued, by procedure and status code",
    labelnames=("method", "code"),
)
RPC_SECONDS = Histogram(
    "cfcopilot_client_rpc_seconds",
    "Copilot RPC latency in seconds",
    labelnames=("method",),
)
