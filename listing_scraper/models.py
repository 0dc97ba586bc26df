from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Union

Record = Dict[str, str]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
)


@dataclass(frozen=True)
class TextSelector:
    """Trimmed text content of the first match of ``selector``."""

    selector: str


@dataclass(frozen=True)
class AttributeSelector:
    """Value of ``attr_name`` on the first match of ``selector``."""

    selector: str
    attr_name: str


SelectorSpec = Union[TextSelector, AttributeSelector]


@dataclass(frozen=True)
class JobConfig:
    url: str
    record_selector: str
    fields: Mapping[str, SelectorSpec]
    pagination_selector: str = "a.next-page"
    identity_field: str = "product_name"
    max_records: int = 100
    wait_time: float = 2.0
    timeout: float = 45.0
    ready_selector: Optional[str] = None
    page_param: str = "page"
    url_fields: FrozenSet[str] = frozenset({"image_url", "product_url"})
    initial_delay: float = 2.0
    settle_delay: float = 8.0
    fallback_timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    renderer: str = "browser"
    headless: bool = True
    max_attempts: int = 3
    retry_delay: float = 2.0

    @property
    def effective_ready_selector(self) -> str:
        return self.ready_selector or self.record_selector


class RenderOutcome(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(frozen=True)
class PageSnapshot:
    url: str
    html: str
    partial: bool = False


class PaginationMode(str, Enum):
    LINK_FOLLOW = "link_follow"
    PARAM_SYNTHESIS = "param_synthesis"
    DONE = "done"


@dataclass(frozen=True)
class PaginationState:
    page_index: int
    url: str
    mode: PaginationMode


@dataclass(frozen=True)
class TraversalResult:
    records: List[Record]
    state: PaginationState
    pages_visited: int


@dataclass(frozen=True)
class RunResult:
    records: List[Record]
    attempts: int
    last_error: Optional[str]
    traversal: Optional[TraversalResult] = None


@dataclass(frozen=True)
class FieldCompleteness:
    field: str
    present: int
    total: int

    @property
    def ratio(self) -> float:
        return self.present / self.total if self.total else 0.0

    @property
    def percent(self) -> float:
        return self.ratio * 100


@dataclass(frozen=True)
class QualityReport:
    total_records: int
    fields: List[FieldCompleteness] = field(default_factory=list)
    incomplete_records: int = 0

    @property
    def incomplete_ratio(self) -> float:
        return self.incomplete_records / self.total_records if self.total_records else 0.0

    def completeness(self, name: str) -> FieldCompleteness:
        for item in self.fields:
            if item.field == name:
                return item
        raise KeyError(name)
