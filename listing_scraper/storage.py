from __future__ import annotations

import csv
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import AbstractSet, List, Sequence

from .errors import ConfigError
from .models import Record
from .urls import clean_url

logger = logging.getLogger(__name__)


class StorageBase(ABC):
    """Abstract base class for record set serializers.

    Subclasses write the whole final record set in one call.
    """

    extension = ""

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def _ensure_parent_dir(self) -> None:
        parent = os.path.dirname(self._path)
        if parent:
            os.makedirs(parent, exist_ok=True)

    @abstractmethod
    def write(self, records: Sequence[Record]) -> None:
        """Persist the record set to ``path``."""


class JsonStorage(StorageBase):
    """Writes records as a JSON array of flat objects, cleaning URL fields first."""

    extension = ".json"

    def __init__(self, path: str, url_fields: AbstractSet[str] = frozenset()) -> None:
        super().__init__(path)
        self._url_fields = frozenset(url_fields)

    def write(self, records: Sequence[Record]) -> None:
        cleaned: List[Record] = []
        for record in records:
            row = dict(record)
            for name in self._url_fields:
                if row.get(name):
                    row[name] = clean_url(row[name])
            cleaned.append(row)

        self._ensure_parent_dir()
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(cleaned, f, ensure_ascii=False, indent=2)
            f.write("\n")
        logger.info("wrote %d records to %s", len(cleaned), self._path)


class CsvStorage(StorageBase):
    """Writes a header row from the first record's keys, then one row per record."""

    extension = ".csv"

    def write(self, records: Sequence[Record]) -> None:
        self._ensure_parent_dir()
        with open(self._path, "w", encoding="utf-8", newline="") as f:
            if not records:
                logger.info("no records; wrote empty %s", self._path)
                return
            headers = list(records[0].keys())
            writer = csv.writer(f)
            writer.writerow(headers)
            for record in records:
                writer.writerow([record.get(h, "") for h in headers])
        logger.info("wrote %d records to %s", len(records), self._path)


def create_storage(output_format: str, output_file: str, url_fields: AbstractSet[str] = frozenset()) -> StorageBase:
    """Pick a serializer by format name; ``output_file`` gets the format's extension."""
    fmt = (output_format or "").lower()
    if fmt == "json":
        return JsonStorage(output_file + JsonStorage.extension, url_fields=url_fields)
    if fmt == "csv":
        return CsvStorage(output_file + CsvStorage.extension)
    raise ConfigError(f"unsupported output format: {output_format}")
