from __future__ import annotations

import time
from typing import Optional, Protocol

from aiohttp import ClientSession, ClientTimeout

from lead_scout.config import ScoutConfig
from lead_scout.crawler.fetcher import Fetcher
from lead_scout.crawler.link_extractor import pick_internal_links
from lead_scout.crawler.models import CrawlResult, CrawlState, FetchOutcome
from lead_scout.logger import logger
from lead_scout.parser.disambiguator import choose_best_cnpj
from lead_scout.parser.entities import extract_cnpjs, extract_emails, extract_phones
from lead_scout.parser.html_parser import html_to_text
from lead_scout.utils import candidate_base_urls, normalize_domain, url_key

__all__ = ("PageFetcher", "SiteCrawler", "crawl_domain")


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> FetchOutcome: ...


class SiteCrawler:
    """
    Sequential crawler of one domain's informative pages.

    Probes the four scheme/host variants, fetches the path catalog and the
    topical links of the home page, then extracts emails, phones and CNPJs
    from everything retrieved. Fetch failures only shrink the result.
    """

    def __init__(self, config: ScoutConfig, fetcher: Optional[PageFetcher] = None) -> None:
        self.config = config
        self.fetcher = fetcher
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> SiteCrawler:
        if self.fetcher is None:
            # the per-request bound is enforced by Fetcher; this only caps stray connections
            self.session = ClientSession(timeout=ClientTimeout(total=self.config.timeout * 2))
            self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self, domain: str) -> CrawlResult:
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized, use 'async with SiteCrawler(...)'")
        domain = normalize_domain(domain)
        logger.info("Crawl started: %s", domain)
        start = time.monotonic()

        state = CrawlState()
        candidates = candidate_base_urls(domain)
        base_url, home = candidates[0], None
        for candidate in candidates:
            root = candidate + "/"
            state = state.mark(url_key(root))
            outcome = await self.fetcher.fetch(root)
            if outcome.ok:
                base_url, home = candidate, outcome
                break
        if home is None:
            logger.warning("No working base URL for %s (https/http, bare/www all failed)", domain)
        else:
            logger.debug("Base URL for %s: %s", domain, base_url)
            state = state.add(home)

        for path in self.config.paths:
            state = await self._visit(state, base_url + path)

        if home is not None:
            extra = pick_internal_links(base_url + "/", home.content or "", self.config.max_extra_links)
            logger.debug("Discovered %d topical links on %s", len(extra), base_url)
            for link in extra:
                state = await self._visit(state, link)

        result = self._extract(base_url, state.markup)
        logger.info(
            "Crawl finished: %s, %d pages in %.2f s, %d emails, %d phones, %d CNPJ candidates",
            base_url,
            len(state.pages),
            time.monotonic() - start,
            len(result.emails),
            len(result.phones),
            len(result.identifier_candidates),
        )
        return result

    async def _visit(self, state: CrawlState, url: str) -> CrawlState:
        key = url_key(url)
        if state.seen(key):
            return state
        state = state.mark(key)
        return state.add(await self.fetcher.fetch(url))  # type: ignore[union-attr]

    def _extract(self, base_url: str, markup: str) -> CrawlResult:
        # raw markup keeps tel:/wa.me hrefs that the visible text loses
        haystack = markup + " " + html_to_text(markup)
        candidates = extract_cnpjs(haystack)
        return CrawlResult(
            base_url=base_url,
            crawled_successfully=len(markup) > 0,
            emails=extract_emails(haystack),
            phones=extract_phones(haystack),
            chosen_identifier=choose_best_cnpj(markup, candidates, self.config.scoring),
            identifier_candidates=candidates,
        )


async def crawl_domain(domain: str, config: ScoutConfig) -> CrawlResult:
    """Open an HTTP session, crawl *domain* once and close the session."""
    async with SiteCrawler(config) as crawler:
        return await crawler.crawl(domain)
