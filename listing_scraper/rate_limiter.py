from __future__ import annotations

import time
from typing import Callable


class RateLimiter:
    """Fixed inter-request delay between page fetches.

    Calling wait() blocks for the configured number of seconds; a delay of
    zero or less disables it."""

    def __init__(self, delay_seconds: float, sleep: Callable[[float], None] = time.sleep) -> None:
        self._delay = max(0.0, float(delay_seconds))
        self._sleep = sleep
        self.waits = 0

    @property
    def delay(self) -> float:
        return self._delay

    def wait(self) -> None:
        """Block until the next page fetch is permitted."""
        if self._delay <= 0:
            return
        self.waits += 1
        self._sleep(self._delay)
