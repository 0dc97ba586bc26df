from __future__ import annotations


class ScraperError(Exception):
    """Base class for all listing scraper errors."""


class ConfigError(ScraperError):
    """Job configuration or field mapping is missing or invalid."""


class RenderError(ScraperError):
    """A page could not be rendered."""


class RenderTimeoutError(RenderError):
    """Page capture exceeded its timeout with no usable fallback markup."""


class ParseError(ScraperError):
    """Rendered markup could not be parsed into a document tree."""


class EmptyResultError(ScraperError):
    """A traversal attempt finished with zero accepted records."""
