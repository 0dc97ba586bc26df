from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

from .models import PaginationMode, PaginationState
from .urls import has_page_marker, resolve_url, synthesize_page_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageOutcome:
    """What one page contributed to the pagination decision."""

    next_href: Optional[str]
    accepted: int


class PaginationRule(ABC):
    """Abstract base class for one way of reaching the next page.

    Each rule inspects the outcome of the page just extracted and decides
    whether it applies; the first applicable rule produces the next state."""

    @abstractmethod
    def should_apply(self, state: PaginationState, outcome: PageOutcome) -> bool:
        """Return True if this rule decides the transition for this page."""
        raise NotImplementedError

    @abstractmethod
    def apply(self, state: PaginationState, outcome: PageOutcome) -> PaginationState:
        """Return the state for the next page."""
        raise NotImplementedError


class LinkFollowRule(PaginationRule):
    """Follows the "next" control when its href carries a page marker and the page yielded records."""

    def __init__(self, page_param: str = "page") -> None:
        self._page_param = page_param

    def should_apply(self, state: PaginationState, outcome: PageOutcome) -> bool:
        if outcome.accepted <= 0 or not outcome.next_href:
            return False
        return has_page_marker(outcome.next_href, self._page_param)

    def apply(self, state: PaginationState, outcome: PageOutcome) -> PaginationState:
        return PaginationState(
            page_index=state.page_index + 1,
            url=resolve_url(outcome.next_href, state.url),
            mode=PaginationMode.LINK_FOLLOW,
        )


class ParamSynthesisRule(PaginationRule):
    """Builds the next address from the job's base URL while pages keep yielding records."""

    def __init__(self, base_url: str, page_param: str = "page") -> None:
        self._base_url = base_url
        self._page_param = page_param

    def should_apply(self, state: PaginationState, outcome: PageOutcome) -> bool:
        return outcome.accepted > 0

    def apply(self, state: PaginationState, outcome: PageOutcome) -> PaginationState:
        next_index = state.page_index + 1
        return PaginationState(
            page_index=next_index,
            url=synthesize_page_url(self._base_url, next_index, self._page_param),
            mode=PaginationMode.PARAM_SYNTHESIS,
        )


class StopRule(PaginationRule):
    """Ends traversal; always applicable, so it must come last."""

    def should_apply(self, state: PaginationState, outcome: PageOutcome) -> bool:
        return True

    def apply(self, state: PaginationState, outcome: PageOutcome) -> PaginationState:
        return PaginationState(page_index=state.page_index, url=state.url, mode=PaginationMode.DONE)


class PaginationStrategy:
    """Decides, after each page, how to reach the next one.

    Rules are evaluated in priority order and the first matching one wins:
    link-follow, then parameter synthesis, then stop."""

    def __init__(self, base_url: str, page_param: str = "page", rules: Optional[Iterable[PaginationRule]] = None) -> None:
        self._base_url = base_url
        if rules is None:
            rules = [LinkFollowRule(page_param), ParamSynthesisRule(base_url, page_param), StopRule()]
        self._rules = list(rules)

    def initial_state(self) -> PaginationState:
        return PaginationState(page_index=0, url=self._base_url, mode=PaginationMode.PARAM_SYNTHESIS)

    def next_state(self, state: PaginationState, outcome: PageOutcome) -> PaginationState:
        for rule in self._rules:
            if rule.should_apply(state, outcome):
                new_state = rule.apply(state, outcome)
                logger.debug(
                    "pagination %s: page %d -> %s (%s)",
                    rule.__class__.__name__,
                    state.page_index,
                    new_state.mode.value,
                    new_state.url,
                )
                return new_state
        return StopRule().apply(state, outcome)

    @staticmethod
    def finish(state: PaginationState) -> PaginationState:
        return PaginationState(page_index=state.page_index, url=state.url, mode=PaginationMode.DONE)
