"""Domain key normalization."""

import re
from urllib.parse import urlparse

_WWW_PREFIX = re.compile(r"^(?:www\.)+")


def normalize_domain(raw) -> str:
    """
    Canonicalize a hostname into a domain key.

    Trims whitespace, lowercases and drops the leading ``www.`` prefix
    (repeated prefixes too, so the result is stable when normalized again).
    Never raises; anything unparseable is returned trimmed and lowercased.

    Examples:
        >>> normalize_domain(" WWW.Example.COM ")
        'example.com'
    """
    return _WWW_PREFIX.sub("", str(raw or "").strip().lower())


def domain_from_url(url) -> str:
    """Extract a normalized domain key from a full URL or a bare host."""
    text = str(url or "").strip()
    if "://" in text:
        try:
            host = urlparse(text).hostname or ""
        except ValueError:
            host = ""
        if host:
            return normalize_domain(host)
    return normalize_domain(text)
