# lead_scout/crawler/link_extractor.py
"""
Discovery of same-host links that look like contact, institutional or policy pages.
"""
from __future__ import annotations

from typing import List, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from lead_scout.utils import safe_urljoin, unique

#: Path fragments (Portuguese and English) of pages worth a visit.
TOPICAL_FRAGMENTS: Tuple[str, ...] = (
    "termo",
    "priv",
    "contato",
    "fale",
    "sobre",
    "quem-somos",
    "institucional",
    "atendimento",
    "politica",
    "reembolso",
    "devol",
    "troca",
    "entrega",
    "frete",
    "envio",
    "shipping",
    "refund",
    "returns",
)

_SKIPPED_PREFIXES = ("#", "mailto:", "tel:")


def looks_topical(path: str) -> bool:
    lowered = path.lower()
    return any(fragment in lowered for fragment in TOPICAL_FRAGMENTS)


def pick_internal_links(base_url: str, html: str, max_links: int = 12) -> List[str]:
    """
    Return up to *max_links* absolute same-host URLs from *html* whose path looks topical.

    Every element with an ``href`` is considered; fragment-only, ``mailto:`` and
    ``tel:`` targets, unresolvable targets and other hosts are skipped.
    """
    if max_links <= 0 or not html:
        return []

    base_host = (urlparse(base_url).hostname or "").lower()
    soup = BeautifulSoup(html, "html.parser")
    links: List[str] = []
    for tag in soup.find_all(href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.lower().startswith(_SKIPPED_PREFIXES):
            continue
        absolute = safe_urljoin(base_url, raw)
        if absolute is None:
            continue
        parsed = urlparse(absolute)
        if (parsed.hostname or "").lower() != base_host:
            continue
        if looks_topical(parsed.path):
            links.append(absolute)
    return unique(links)[:max_links]
