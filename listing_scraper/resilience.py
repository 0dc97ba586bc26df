from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from .backoff import BackoffStrategy
from .base import BaseRenderer
from .errors import EmptyResultError
from .factory import RendererFactory
from .models import JobConfig, Record, RunResult, TraversalResult
from .traversal import TraversalLoop

logger = logging.getLogger(__name__)


class RetryEnvelope:
    """Bounded retry around whole traversal attempts.

    An attempt is retried when it raises or returns no records. The first
    non-empty attempt wins. When every attempt fails the most recent
    non-empty partial record set is kept, so gathered data is never lost.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        backoff: Optional[BackoffStrategy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._max_attempts = max(1, int(max_attempts))
        self._backoff = backoff or BackoffStrategy()
        self._sleep = sleep

    def run(self, attempt_fn: Callable[[], TraversalLoop]) -> RunResult:
        """Run ``attempt_fn`` (returns a fresh, unstarted TraversalLoop) up to max_attempts times."""
        kept: List[Record] = []
        last_traversal: Optional[TraversalResult] = None
        last_error: Optional[str] = None

        attempt = 0
        while attempt < self._max_attempts:
            attempt += 1
            loop = attempt_fn()
            try:
                traversal = loop.run()
            except Exception as exc:  # noqa: BLE001
                last_error = type(exc).__name__
                logger.warning("attempt %d/%d failed: %s: %s", attempt, self._max_attempts, last_error, exc)
                if loop.records:
                    kept = list(loop.records)
            else:
                if traversal.records:
                    return RunResult(records=traversal.records, attempts=attempt, last_error=None, traversal=traversal)
                last_traversal = traversal
                err = EmptyResultError(f"attempt {attempt} produced no records")
                last_error = type(err).__name__
                logger.warning("attempt %d/%d: %s", attempt, self._max_attempts, err)

            if attempt < self._max_attempts:
                delay = self._backoff.get_sleep(attempt, last_error)
                logger.info("retrying in %.1fs", delay)
                self._sleep(delay)

        logger.error("all %d attempts failed (last error: %s); keeping %d records", attempt, last_error, len(kept))
        return RunResult(records=kept, attempts=attempt, last_error=last_error, traversal=last_traversal)


def run_job(
    config: JobConfig,
    renderer: Optional[BaseRenderer] = None,
    envelope: Optional[RetryEnvelope] = None,
) -> RunResult:
    """Run one scraping job end to end.

    The rendering session is opened once for the whole run and closed on
    every exit path. Each attempt restarts from the original URL with an
    empty record set.
    """
    if renderer is None:
        renderer = RendererFactory().create_renderer(config)
    if envelope is None:
        envelope = RetryEnvelope(
            max_attempts=config.max_attempts,
            backoff=BackoffStrategy(base_seconds=config.retry_delay),
        )

    with renderer:
        return envelope.run(lambda: TraversalLoop(config, renderer))
