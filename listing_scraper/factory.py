from __future__ import annotations

from .base import BaseRenderer
from .errors import ConfigError
from .models import JobConfig
from .renderers import BrowserRenderer, HttpRenderer


class RendererFactory:
    """Factory for creating the rendering backend named by a job's configuration.

    - ``browser`` renders with headless Chromium (script-rendered listings).
    - ``http`` fetches served HTML with browser impersonation.
    A new, unopened renderer is returned on every call; the caller owns its session.
    """

    def create_renderer(self, config: JobConfig) -> BaseRenderer:
        name = config.renderer

        if name == "browser":
            renderer: BaseRenderer = BrowserRenderer(
                user_agent=config.user_agent,
                headless=config.headless,
                initial_delay=config.initial_delay,
                settle_delay=config.settle_delay,
                fallback_timeout=config.fallback_timeout,
            )
        elif name == "http":
            renderer = HttpRenderer(
                user_agent=config.user_agent,
                fallback_timeout=config.fallback_timeout,
            )
        else:
            raise ConfigError(f"Unknown renderer: {name}")

        return renderer
