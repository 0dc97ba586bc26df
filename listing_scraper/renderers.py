from __future__ import annotations

import logging
import time as _time
from typing import Any, Optional

from curl_cffi import requests as curl_requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from .base import BaseRenderer
from .errors import RenderError, RenderTimeoutError
from .models import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

SCROLL_TO_BOTTOM_JS = "window.scrollTo(0, document.body.scrollHeight)"
FALLBACK_POLL_SECS = 0.25


class BrowserRenderer(BaseRenderer):
    """Headless Chromium session driven through Playwright's sync API.

    One browser, context and page are created on ``open()`` and reused for
    every page of the run. Images are never loaded.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        headless: bool = True,
        initial_delay: float = 2.0,
        settle_delay: float = 8.0,
        *args,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._user_agent = user_agent
        self._headless = headless
        self._initial_delay = initial_delay
        self._settle_delay = settle_delay
        self._playwright: Any = None
        self._browser: Any = None
        self._context: Any = None
        self._page: Any = None

    def open(self) -> None:
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=self._headless,
                args=["--blink-settings=imagesEnabled=false"],
            )
            self._context = self._browser.new_context(user_agent=self._user_agent)
            self._context.route("**/*", _block_images)
            self._page = self._context.new_page()
        except Exception:
            self.close()
            raise
        logger.info("browser session started (headless=%s)", self._headless)

    def close(self) -> None:
        for resource in (self._context, self._browser):
            if resource is None:
                continue
            try:
                resource.close()
            except PlaywrightError as exc:
                logger.warning("error closing browser resource: %s", exc)
        if self._playwright is not None:
            self._playwright.stop()
        self._page = self._context = self._browser = self._playwright = None
        logger.info("browser session closed")

    def capture(self, url: str, ready_selector: str, timeout: float) -> str:
        deadline = _time.monotonic() + timeout
        page = self._page
        try:
            page.goto(url, wait_until="domcontentloaded", timeout=_remaining_ms(deadline))
            self._pause(self._initial_delay, deadline)
            page.wait_for_selector(ready_selector, state="attached", timeout=_remaining_ms(deadline))
            page.evaluate(SCROLL_TO_BOTTOM_JS)
            self._pause(self._settle_delay, deadline)
            return page.content()
        except PlaywrightTimeoutError as exc:
            raise RenderTimeoutError(f"timed out rendering {url}: {exc}") from exc
        except PlaywrightError as exc:
            raise RenderError(f"error rendering {url}: {exc}") from exc

    def capture_fallback(self, timeout: float) -> str:
        """Read the current document, waiting up to ``timeout`` for a navigation to settle."""
        if self._page is None:
            return ""
        deadline = _time.monotonic() + timeout
        page = self._page
        try:
            page.wait_for_load_state("domcontentloaded", timeout=timeout * 1000)
        except PlaywrightError as exc:
            logger.debug("document not loaded before partial capture: %s", exc)

        while True:
            try:
                return page.content() or ""
            except PlaywrightError as exc:
                left = deadline - _time.monotonic()
                if left <= 0:
                    raise RenderError(f"partial capture failed: {exc}") from exc
                page.wait_for_timeout(min(FALLBACK_POLL_SECS, left) * 1000)

    def _pause(self, seconds: float, deadline: float) -> None:
        left = deadline - _time.monotonic()
        wait_s = min(seconds, max(left, 0.0))
        if wait_s > 0:
            self._page.wait_for_timeout(wait_s * 1000)


class HttpRenderer(BaseRenderer):
    """Plain HTTP session impersonating a desktop Chrome TLS fingerprint.

    For listing pages whose records are present in the served HTML, so no
    script execution, waiting or scrolling is needed.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        impersonate: str = "chrome120",
        *args,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._user_agent = user_agent
        self._impersonate = impersonate
        self._session: Optional[curl_requests.Session] = None

    def open(self) -> None:
        self._session = curl_requests.Session()
        logger.info("http session started (impersonate=%s)", self._impersonate)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def capture(self, url: str, ready_selector: str, timeout: float) -> str:
        try:
            response = self._session.get(
                url,
                headers={"User-Agent": self._user_agent},
                impersonate=self._impersonate,
                timeout=timeout,
            )
        except Exception as exc:  # noqa: BLE001
            if "timeout" in type(exc).__name__.lower() or "timed out" in str(exc).lower():
                raise RenderTimeoutError(f"timed out fetching {url}: {exc}") from exc
            raise RenderError(f"error fetching {url}: {type(exc).__name__}: {exc}") from exc

        status_code = getattr(response, "status_code", None)
        if status_code is None or not 200 <= int(status_code) < 300:
            raise RenderError(f"HTTP_{status_code} fetching {url}")
        return response.text

    def capture_fallback(self, timeout: float) -> str:
        return ""


def _remaining_ms(deadline: float) -> float:
    left = deadline - _time.monotonic()
    if left <= 0:
        raise RenderTimeoutError("page render budget exhausted")
    return left * 1000


def _block_images(route: Any) -> None:
    if route.request.resource_type == "image":
        route.abort()
    else:
        route.continue_()
