from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from .errors import RenderError, RenderTimeoutError
from .models import PageSnapshot, RenderOutcome

logger = logging.getLogger(__name__)


class BaseRenderer(ABC):
    """Abstract base class owning one rendering session for a whole run.

    - The session is opened on ``__enter__`` and always closed on ``__exit__``.
    - A failed full capture never fails the page outright: a shorter
      secondary capture is tried and its markup returned as a partial snapshot.
    - Only when the secondary capture is empty does the page count as failed.
    """

    def __init__(self, fallback_timeout: float = 15.0) -> None:
        self._fallback_timeout = fallback_timeout
        self._opened = False

    def __enter__(self) -> "BaseRenderer":
        self.open()
        self._opened = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._opened = False
        self.close()

    @property
    def is_open(self) -> bool:
        return self._opened

    def fetch(self, url: str, ready_selector: str, timeout: float) -> Tuple[PageSnapshot, RenderOutcome]:
        if not self._opened:
            raise RuntimeError("renderer session is not open; use it as a context manager")
        if not url:
            raise ValueError("url is required")

        start_ms = self._now_ms()
        try:
            html = self.capture(url, ready_selector, timeout)
            logger.debug("captured %s in %d ms", url, self._now_ms() - start_ms)
            return PageSnapshot(url=url, html=html), RenderOutcome.COMPLETE
        except RenderError as exc:
            logger.warning("full capture of %s failed (%s), attempting partial capture", url, exc)

        partial: Optional[str] = None
        try:
            partial = self.capture_fallback(self._fallback_timeout)
        except RenderError as exc:
            logger.warning("partial capture of %s failed: %s", url, exc)

        if partial:
            return PageSnapshot(url=url, html=partial, partial=True), RenderOutcome.PARTIAL

        err = RenderTimeoutError(f"no usable markup for {url} after {timeout:g}s")
        logger.error("%s", err)
        return PageSnapshot(url=url, html="", partial=True), RenderOutcome.FAILED

    @abstractmethod
    def open(self) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    @abstractmethod
    def capture(self, url: str, ready_selector: str, timeout: float) -> str:
        """Navigate, wait, scroll and return the full document markup.

        Raises RenderTimeoutError or RenderError on failure.
        """

    @abstractmethod
    def capture_fallback(self, timeout: float) -> str:
        """Return whatever markup the session currently holds, or ''."""

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)
