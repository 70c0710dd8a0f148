# lead_scout/crawler/models.py
"""
Data models for the LeadScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Result of one bounded GET: content on success, status/error otherwise."""

    url: str
    status: Optional[int] = None
    content: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.content is not None


@dataclass(frozen=True, slots=True)
class PageData:
    """Holds the URL and markup of a successfully fetched page."""

    url: str
    content: str


@dataclass(frozen=True, slots=True)
class CrawlState:
    """Immutable accumulator folded over the fetch outcomes of one crawl."""

    visited: FrozenSet[str] = frozenset()
    pages: Tuple[PageData, ...] = ()

    def seen(self, key: str) -> bool:
        return key in self.visited

    def mark(self, key: str) -> CrawlState:
        return replace(self, visited=self.visited | {key})

    def add(self, outcome: FetchOutcome) -> CrawlState:
        if not outcome.ok:
            return self
        return replace(self, pages=self.pages + (PageData(outcome.url, outcome.content or ""),))

    @property
    def markup(self) -> str:
        return "".join("\n" + page.content for page in self.pages)


@dataclass(slots=True)
class CrawlResult:
    """What one crawl found for a domain."""

    base_url: str
    crawled_successfully: bool
    emails: List[str] = field(default_factory=list)
    phones: List[str] = field(default_factory=list)
    chosen_identifier: Optional[str] = None
    identifier_candidates: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_url": self.base_url,
            "crawled_successfully": self.crawled_successfully,
            "emails": list(self.emails),
            "phones": list(self.phones),
            "chosen_identifier": self.chosen_identifier,
            "identifier_candidates": list(self.identifier_candidates),
        }
