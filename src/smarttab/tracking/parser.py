"""URL classification and domain extraction."""

from __future__ import annotations

from urllib.parse import urlparse

UNKNOWN_DOMAIN = "unknown"

_TRACKABLE_SCHEMES = {"http", "https"}


def is_trackable_url(url: str | None) -> bool:
    """True for ordinary web pages; host-internal schemes are not tracked."""
    url = (url or "").strip()
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in _TRACKABLE_SCHEMES and bool(parsed.hostname)


def extract_domain(url: str | None) -> str:
    """Hostname of ``url`` without a leading ``www.``; ``unknown`` if unparsable."""
    try:
        hostname = urlparse((url or "").strip()).hostname
    except ValueError:
        return UNKNOWN_DOMAIN
    domain = normalize_domain(hostname or "")
    return domain or UNKNOWN_DOMAIN


def normalize_domain(domain: str) -> str:
    domain = (domain or "").strip().lower()
    if domain.startswith("www."):
        domain = domain[4:]
    return domain
