"""Turns a rendered page snapshot into records.

The record selector picks each listing item; every field's SelectorSpec is then
evaluated relative to that item. Items without an identity value are dropped.
"""
from __future__ import annotations

import logging
from typing import AbstractSet, Iterator, Mapping, Optional

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag

from .errors import ParseError
from .models import AttributeSelector, PageSnapshot, Record, SelectorSpec, TextSelector
from .urls import resolve_url

logger = logging.getLogger(__name__)


class ExtractionEngine:
    def __init__(self, url_fields: AbstractSet[str] = frozenset(), parser: str = "html.parser") -> None:
        self._url_fields = frozenset(url_fields)
        self._parser = parser

    def parse(self, snapshot: PageSnapshot) -> BeautifulSoup:
        """Parse snapshot markup into a queryable document tree."""
        if not isinstance(snapshot.html, (str, bytes)):
            raise ParseError(f"no markup to parse from {snapshot.url}")
        try:
            return BeautifulSoup(snapshot.html, self._parser)
        except (ParserRejectedMarkup, TypeError) as exc:
            raise ParseError(f"cannot parse markup from {snapshot.url}: {exc}") from exc

    def extract(
        self,
        snapshot: PageSnapshot,
        record_selector: str,
        field_specs: Mapping[str, SelectorSpec],
        identity_field: str,
        remaining_capacity: int,
    ) -> Iterator[Record]:
        document = self.parse(snapshot)
        yield from self.extract_document(
            document, snapshot.url, record_selector, field_specs, identity_field, remaining_capacity
        )

    def extract_document(
        self,
        document: BeautifulSoup,
        source_url: str,
        record_selector: str,
        field_specs: Mapping[str, SelectorSpec],
        identity_field: str,
        remaining_capacity: int,
    ) -> Iterator[Record]:
        """Yield accepted records in document order, at most ``remaining_capacity`` of them."""
        produced = 0
        if remaining_capacity <= 0:
            return
        for node in document.select(record_selector):
            record: Record = {}
            for name, spec in field_specs.items():
                value = evaluate(node, spec)
                if value and name in self._url_fields:
                    value = resolve_url(value, source_url)
                record[name] = value

            if not record.get(identity_field):
                logger.debug("dropping record without %s on %s", identity_field, source_url)
                continue

            yield record
            produced += 1
            if produced >= remaining_capacity:
                return

    @staticmethod
    def find_next_href(document: BeautifulSoup, pagination_selector: str) -> Optional[str]:
        """Return the href of the first pagination element, or None when it has none."""
        if not pagination_selector:
            return None
        element = document.select_one(pagination_selector)
        if element is None:
            return None
        href = element.get("href")
        if href is None:
            return None
        return href.strip()


def evaluate(node: Tag, spec: SelectorSpec) -> str:
    """Evaluate one field selector against a record node; '' when nothing matches."""
    match = node.select_one(spec.selector)
    if match is None:
        return ""
    if isinstance(spec, TextSelector):
        return match.get_text().strip()
    if isinstance(spec, AttributeSelector):
        value = match.get(spec.attr_name)
        if value is None:
            return ""
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip()
    raise TypeError(f"unsupported selector spec: {spec!r}")
