"""Tests for the concrete rendering backends, with the browser and network mocked out."""

import unittest
from unittest.mock import MagicMock, patch

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from listing_scraper.errors import RenderError, RenderTimeoutError
from listing_scraper.models import DEFAULT_USER_AGENT, RenderOutcome
from listing_scraper.renderers import SCROLL_TO_BOTTOM_JS, BrowserRenderer, HttpRenderer, _block_images


class TestBrowserRendererCapture(unittest.TestCase):
    """Verify the navigate, wait, scroll, settle, capture sequence."""

    def setUp(self):
        self.renderer = BrowserRenderer(initial_delay=0.01, settle_delay=0.01)
        self.page = MagicMock()
        self.page.content.return_value = "<html><li class='item'></li></html>"
        self.renderer._page = self.page

    def test_capture_sequence(self):
        """Capture navigates, waits, scrolls and pauses twice."""
        html = self.renderer.capture("https://x.test/cat", "li.item", 5)
        self.assertIn("li", html)
        self.page.goto.assert_called_once()
        self.assertEqual(self.page.goto.call_args[0][0], "https://x.test/cat")
        self.page.wait_for_selector.assert_called_once()
        self.assertEqual(self.page.wait_for_selector.call_args[0][0], "li.item")
        self.assertEqual(self.page.wait_for_selector.call_args[1]["state"], "attached")
        self.page.evaluate.assert_called_once_with(SCROLL_TO_BOTTOM_JS)
        self.assertEqual(self.page.wait_for_timeout.call_count, 2)

    def test_wait_timeout_raises_render_timeout(self):
        """A Playwright timeout becomes RenderTimeoutError."""
        self.page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout 5000ms exceeded")
        with self.assertRaises(RenderTimeoutError):
            self.renderer.capture("https://x.test/cat", "li.item", 5)
        self.page.evaluate.assert_not_called()

    def test_navigation_error_raises_render_error(self):
        """Other Playwright errors become RenderError."""
        self.page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        with self.assertRaises(RenderError):
            self.renderer.capture("https://x.test/cat", "li.item", 5)

    def test_fallback_returns_current_markup(self):
        """The fallback waits for the document under its own timeout, then reads it."""
        self.assertIn("li", self.renderer.capture_fallback(15))
        self.page.wait_for_load_state.assert_called_once_with("domcontentloaded", timeout=15000)
        self.page.set_default_timeout.assert_not_called()

    def test_fallback_retries_while_page_is_navigating(self):
        """A content() call that fails mid-navigation is retried until it succeeds."""
        self.page.wait_for_load_state.side_effect = PlaywrightTimeoutError("Timeout 15000ms exceeded")
        self.page.content.side_effect = [
            PlaywrightError("Unable to retrieve content because the page is navigating"),
            "<html><li class='item'></li></html>",
        ]
        self.assertIn("li", self.renderer.capture_fallback(15))
        self.assertEqual(self.page.content.call_count, 2)
        self.page.wait_for_timeout.assert_called_once()

    def test_fallback_gives_up_at_deadline(self):
        """With no time left a failing content() call becomes a RenderError."""
        self.page.content.side_effect = PlaywrightError("page is navigating")
        with self.assertRaises(RenderError):
            self.renderer.capture_fallback(0)

    def test_fetch_partial_after_navigation_timeout(self):
        """A goto timeout followed by a late document still yields a partial snapshot."""
        self.page.goto.side_effect = PlaywrightTimeoutError("Timeout")
        self.page.content.side_effect = [
            PlaywrightError("page is navigating"),
            "<html><li class='item'></li></html>",
        ]
        self.renderer._opened = True
        snapshot, outcome = self.renderer.fetch("https://x.test/cat", "li.item", 5)
        self.assertEqual(outcome, RenderOutcome.PARTIAL)
        self.assertIn("li", snapshot.html)

    def test_fetch_uses_partial_capture_after_timeout(self):
        """fetch() falls back to a partial snapshot after a timeout."""
        self.page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout")
        self.renderer._opened = True
        snapshot, outcome = self.renderer.fetch("https://x.test/cat", "li.item", 5)
        self.assertEqual(outcome, RenderOutcome.PARTIAL)
        self.assertTrue(snapshot.partial)


class TestBrowserRendererSession(unittest.TestCase):
    """Verify the browser session is configured once and torn down."""

    @patch("listing_scraper.renderers.sync_playwright")
    def test_open_configures_identity_and_blocks_images(self, sync_playwright):
        """The session gets the fixed user agent and blocks images."""
        pw = sync_playwright.return_value.start.return_value
        browser = pw.chromium.launch.return_value
        context = browser.new_context.return_value

        renderer = BrowserRenderer()
        with renderer:
            launch_kwargs = pw.chromium.launch.call_args[1]
            self.assertIn("--blink-settings=imagesEnabled=false", launch_kwargs["args"])
            browser.new_context.assert_called_once_with(user_agent=DEFAULT_USER_AGENT)
            context.route.assert_called_once_with("**/*", _block_images)

        context.close.assert_called_once()
        browser.close.assert_called_once()
        pw.stop.assert_called_once()

    def test_block_images(self):
        """Image requests are aborted and the rest continue."""
        route = MagicMock()
        route.request.resource_type = "image"
        _block_images(route)
        route.abort.assert_called_once()

        route = MagicMock()
        route.request.resource_type = "document"
        _block_images(route)
        route.continue_.assert_called_once()


class Timeout(Exception):
    pass


class TestHttpRenderer(unittest.TestCase):
    """Verify the impersonating HTTP backend."""

    def setUp(self):
        self.renderer = HttpRenderer()
        self.session = MagicMock()
        self.renderer._session = self.session

    def test_capture_returns_body(self):
        """A 2xx response body is returned as the markup."""
        self.session.get.return_value = MagicMock(status_code=200, text="<html>ok</html>")
        self.assertEqual(self.renderer.capture("https://x.test/cat", "li.item", 10), "<html>ok</html>")
        kwargs = self.session.get.call_args[1]
        self.assertEqual(kwargs["impersonate"], "chrome120")
        self.assertEqual(kwargs["headers"]["User-Agent"], DEFAULT_USER_AGENT)
        self.assertEqual(kwargs["timeout"], 10)

    def test_http_error_status_raises(self):
        """A non-2xx status is a RenderError naming the code."""
        self.session.get.return_value = MagicMock(status_code=503, text="busy")
        with self.assertRaises(RenderError) as ctx:
            self.renderer.capture("https://x.test/cat", "li.item", 10)
        self.assertIn("HTTP_503", str(ctx.exception))

    def test_timeout_raises_render_timeout(self):
        """Transport timeouts become RenderTimeoutError."""
        self.session.get.side_effect = Timeout("Operation timed out")
        with self.assertRaises(RenderTimeoutError):
            self.renderer.capture("https://x.test/cat", "li.item", 10)

    def test_fallback_is_empty(self):
        """The HTTP backend has nothing to fall back to."""
        self.assertEqual(self.renderer.capture_fallback(15), "")


if __name__ == "__main__":
    unittest.main()
