from __future__ import annotations

import re as _re
from urllib.parse import urlsplit as _urlsplit, urlunsplit as _urlunsplit

_ABSOLUTE_RE = _re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def is_absolute(url: str) -> bool:
    """True for any value carrying a URI scheme, including ``data:`` and ``mailto:``."""
    return bool(_ABSOLUTE_RE.match(url))


def base_url(url: str) -> str:
    """Scheme and host of ``url`` with no trailing slash, or ``url`` itself if it has neither."""
    u = _urlsplit(url)
    if not u.scheme or not u.netloc:
        return url
    return f"{u.scheme}://{u.netloc}"


def resolve_url(value: str, source_url: str) -> str:
    """Prefix a relative ``value`` with the scheme and host of ``source_url``.

    Absolute and empty values come back unchanged, so resolving twice is a no-op.
    Protocol-relative values (``//cdn.host/x``) only borrow the scheme.
    """
    if not value or is_absolute(value):
        return value
    if value.startswith("//"):
        scheme = _urlsplit(source_url).scheme or "https"
        return f"{scheme}:{value}"
    prefix = base_url(source_url)
    if not value.startswith("/"):
        value = "/" + value
    return prefix + value


def has_page_marker(href: str, page_param: str = "page") -> bool:
    return f"{page_param}=" in href


def synthesize_page_url(base: str, page_index: int, page_param: str = "page") -> str:
    """Append ``page_param=page_index`` to the job's base URL."""
    sep = "&" if "?" in base else "?"
    return f"{base}{sep}{page_param}={page_index}"


def clean_url(url: str) -> str:
    """Repair escaped ampersands, a collapsed ``https:/`` prefix and doubled path slashes."""
    if not url:
        return url
    url = url.replace("\\u0026", "&")
    url = _re.sub(r"^(https?):/(?!/)", r"\1://", url)
    u = _urlsplit(url)
    if not u.scheme or not u.netloc:
        return url
    path = _re.sub(r"/{2,}", "/", u.path)
    return _urlunsplit((u.scheme, u.netloc, path, u.query, u.fragment))
