from __future__ import annotations

import json
from typing import Dict, Iterable, Mapping, Optional
from urllib.parse import urlsplit

from .errors import ConfigError
from .models import DEFAULT_USER_AGENT, JobConfig, SelectorSpec
from .selector_spec import parse_field_mapping, validate_css

DEFAULT_PAGINATION_SELECTOR = "a.next-page"
DEFAULT_IDENTITY_FIELD = "product_name"
DEFAULT_MAX_RECORDS = 100
DEFAULT_WAIT_SECS = 2.0
DEFAULT_TIMEOUT_SECS = 45.0
DEFAULT_URL_FIELDS = frozenset({"image_url", "product_url"})

RENDERERS = ("browser", "http")


def load_field_mapping(path: str) -> Dict[str, SelectorSpec]:
    """Read a JSON ``{"field": "selector[@attr:name]"}`` file and parse every expression."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"field mapping file not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"cannot parse field mapping {path}: {exc}") from exc

    if not isinstance(raw, dict) or not raw:
        raise ConfigError(f"field mapping {path} must be a non-empty JSON object")
    return parse_field_mapping(raw)


def build_job_config(
    url: str,
    record_selector: str,
    fields: Mapping[str, SelectorSpec],
    pagination_selector: str = DEFAULT_PAGINATION_SELECTOR,
    identity_field: str = DEFAULT_IDENTITY_FIELD,
    max_records: int = DEFAULT_MAX_RECORDS,
    wait_time: float = DEFAULT_WAIT_SECS,
    timeout: float = DEFAULT_TIMEOUT_SECS,
    url_fields: Optional[Iterable[str]] = None,
    renderer: str = "browser",
    headless: bool = True,
    user_agent: str = DEFAULT_USER_AGENT,
    **overrides,
) -> JobConfig:
    """Validate run parameters and freeze them into a JobConfig."""
    parts = urlsplit(url or "")
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigError(f"target URL must be an absolute http(s) URL: {url!r}")
    if not record_selector or not record_selector.strip():
        raise ConfigError("record selector is required")
    if not fields:
        raise ConfigError("at least one field selector is required")
    if identity_field not in fields:
        raise ConfigError(f"identity field {identity_field!r} is not in the field mapping")
    if max_records < 0:
        raise ConfigError("max records must be >= 0")
    if wait_time < 0:
        raise ConfigError("wait time must be >= 0")
    if timeout <= 0:
        raise ConfigError("render timeout must be > 0")
    if renderer not in RENDERERS:
        raise ConfigError(f"unknown renderer {renderer!r}, expected one of {', '.join(RENDERERS)}")
    validate_css(record_selector.strip())
    if pagination_selector:
        validate_css(pagination_selector)

    return JobConfig(
        url=url,
        record_selector=record_selector.strip(),
        fields=dict(fields),
        pagination_selector=pagination_selector,
        identity_field=identity_field,
        max_records=int(max_records),
        wait_time=float(wait_time),
        timeout=float(timeout),
        url_fields=frozenset(url_fields) if url_fields is not None else DEFAULT_URL_FIELDS,
        renderer=renderer,
        headless=headless,
        user_agent=user_agent,
        **overrides,
    )
