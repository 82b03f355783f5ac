"""Bring-up health gate: block until copilot reports healthy.

This is a bootstrap convenience for tests and deploy scripts, not part of the
client's steady-state behaviour.
"""
from __future__ import annotations

import time
from typing import Callable, Optional, Protocol

from .core.errors import RemoteCallError, StartupTimeoutError
from .telemetry.logging import get_logger

DEFAULT_RETRIES = 5
DEFAULT_INTERVAL = 1.0


class HealthChecker(Protocol):
    def check_health(self) -> bool: ...


def wait_until_healthy(
    client: HealthChecker,
    retries: int = DEFAULT_RETRIES,
    interval: float = DEFAULT_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll ``client.check_health()`` until it answers True.

    Unhealthy answers and RemoteCallErrors both count as failed checks. Gives
    up with StartupTimeoutError once more than ``retries`` checks have failed.
    Returns the number of checks made.
    """
    log = get_logger("copilot.health")
    failures = 0
    last_error: Optional[BaseException] = None
    while True:
        try:
            if client.check_health():
                return failures + 1
            last_error = None
        except RemoteCallError as e:
            last_error = e
        failures += 1
        if failures > retries:
            raise StartupTimeoutError(failures, last_error)
        log.debug(f"copilot not healthy yet (check {failures}, error={last_error})")
        sleep(interval)
