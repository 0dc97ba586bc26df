from __future__ import annotations

import random
from typing import Optional


class BackoffStrategy:
    """Delay between whole-run retry attempts.

    Computes base * factor^(attempt-1) plus random jitter, capped at a
    configurable maximum. The defaults give the fixed 2 second pause the
    retry envelope uses; a factor above 1 makes it exponential."""

    def __init__(
        self,
        base_seconds: float = 2.0,
        max_seconds: float = 30.0,
        factor: float = 1.0,
        jitter_ratio: float = 0.0,
    ) -> None:
        self._base = base_seconds
        self._max = max_seconds
        self._factor = factor
        self._jitter_ratio = jitter_ratio

    def get_sleep(self, attempt: int, error_type: Optional[str] = None) -> float:
        """Calculate the sleep duration in seconds after a failed attempt."""
        delay = min(self._max, self._base * (self._factor ** max(attempt - 1, 0)))
        if self._jitter_ratio <= 0:
            return delay
        return delay + random.uniform(0, delay * self._jitter_ratio)
