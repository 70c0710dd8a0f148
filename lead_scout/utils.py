# File: lead_scout/utils.py
"""lead_scout.utils: domain and URL helpers shared by the crawler and the engine."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, TypeVar
from urllib.parse import urljoin, urlparse, urlunparse

from lead_scout.logger import logger

__all__: Sequence[str] = (
    "normalize_domain",
    "candidate_base_urls",
    "url_key",
    "safe_urljoin",
    "unique",
)

T = TypeVar("T")

_SCHEME_RE = re.compile(r"^https?://")
_WWW_RE = re.compile(r"^(?:www\.)+")
_SUFFIX_RE = re.compile(r"[/?#]")


def normalize_domain(value: Optional[str]) -> str:
    """Bare lower-case host: no scheme, no leading ``www.``, nothing after the first ``/``, ``?`` or ``#``."""
    domain = (value or "").strip().lower()
    domain = _SCHEME_RE.sub("", domain)
    domain = _SUFFIX_RE.split(domain, 1)[0]
    return _WWW_RE.sub("", domain)


def candidate_base_urls(domain: str) -> List[str]:
    """Scheme/host variants of *domain* in probing order."""
    return [
        f"https://{domain}",
        f"https://www.{domain}",
        f"http://{domain}",
        f"http://www.{domain}",
    ]


def url_key(url: str) -> str:
    """Identity of a URL for the visited set: scheme, host, path and query."""
    parsed = urlparse(url)
    return urlunparse((parsed.scheme.lower(), parsed.netloc.lower(), parsed.path or "/", "", parsed.query, ""))


def safe_urljoin(base: str, target: str) -> Optional[str]:
    """Resolve *target* against *base*; ``None`` when the result is not a usable http(s) URL."""
    try:
        absolute = urljoin(base, target)
        parsed = urlparse(absolute)
        # .port raises ValueError on malformed netlocs
        host, _port = parsed.hostname, parsed.port
        if parsed.scheme not in ("http", "https") or not host:
            return None
    except ValueError as exc:
        logger.debug("Cannot resolve %r against %s: %s", target, base, exc)
        return None
    return absolute


def unique(items: Iterable[Optional[T]]) -> List[T]:
    """Drop falsy items and duplicates, keeping first-seen order."""
    return list(dict.fromkeys(item for item in items if item))
