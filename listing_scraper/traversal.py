from __future__ import annotations

import logging
from typing import List, Optional

from .base import BaseRenderer
from .extraction import ExtractionEngine
from .models import JobConfig, PaginationMode, PaginationState, Record, RenderOutcome, TraversalResult
from .pagination import PageOutcome, PaginationStrategy
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class TraversalLoop:
    """One traversal attempt: fetch, extract and paginate until done or the cap is reached.

    Pages are strictly sequential. Records gathered so far remain available
    on ``records`` even if ``run()`` raises, so the caller can keep them.
    """

    def __init__(
        self,
        config: JobConfig,
        renderer: BaseRenderer,
        engine: Optional[ExtractionEngine] = None,
        strategy: Optional[PaginationStrategy] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self._config = config
        self._renderer = renderer
        self._engine = engine or ExtractionEngine(url_fields=config.url_fields)
        self._strategy = strategy or PaginationStrategy(config.url, config.page_param)
        self._rate_limiter = rate_limiter or RateLimiter(config.wait_time)
        self.records: List[Record] = []
        self.pages_visited = 0
        self.state: PaginationState = self._strategy.initial_state()

    def run(self) -> TraversalResult:
        config = self._config
        state = self.state

        while state.mode is not PaginationMode.DONE and len(self.records) < config.max_records:
            logger.info("Scraping page %d: %s", state.page_index, state.url)
            snapshot, render_outcome = self._renderer.fetch(
                state.url, config.effective_ready_selector, config.timeout
            )
            self.pages_visited += 1

            accepted = 0
            next_href = None
            if render_outcome is not RenderOutcome.FAILED:
                document = self._engine.parse(snapshot)
                remaining = config.max_records - len(self.records)
                for record in self._engine.extract_document(
                    document,
                    snapshot.url,
                    config.record_selector,
                    config.fields,
                    config.identity_field,
                    remaining,
                ):
                    self.records.append(record)
                    accepted += 1
                next_href = self._engine.find_next_href(document, config.pagination_selector)

            logger.info(
                "Found %d records on page %d%s",
                accepted,
                state.page_index,
                " (partial snapshot)" if render_outcome is RenderOutcome.PARTIAL else "",
            )

            if len(self.records) >= config.max_records:
                state = self._strategy.finish(state)
                self.state = state
                logger.info("record cap of %d reached", config.max_records)
                break

            state = self._strategy.next_state(state, PageOutcome(next_href=next_href, accepted=accepted))
            self.state = state
            if state.mode is not PaginationMode.DONE:
                self._rate_limiter.wait()

        if state.mode is not PaginationMode.DONE:
            state = self._strategy.finish(state)
            self.state = state

        return TraversalResult(records=list(self.records), state=state, pages_visited=self.pages_visited)
