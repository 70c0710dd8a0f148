# File: lead_scout/engine.py
"""lead_scout.engine: orchestration of one lead inspection (crawl, technology profile, company record)."""

from __future__ import annotations

from typing import Optional

from aiohttp import ClientSession, ClientTimeout

from lead_scout.aggregator import LeadProfile, build_profile
from lead_scout.config import ScoutConfig
from lead_scout.crawler.crawler import SiteCrawler
from lead_scout.crawler.fetcher import Fetcher
from lead_scout.enrich.builtwith import BuiltWithClient
from lead_scout.enrich.classifier import classify_technologies
from lead_scout.enrich.company import CompanyLookupClient
from lead_scout.logger import logger
from lead_scout.utils import normalize_domain

__all__ = ["Engine", "inspect_domain"]


class Engine:
    """Facade for the CLI, the web app and tests."""

    def __init__(self, config: ScoutConfig) -> None:
        self.config = config

    def _session(self) -> ClientSession:
        return ClientSession(timeout=ClientTimeout(total=self.config.timeout * 2))

    async def inspect(self, domain: str, session: Optional[ClientSession] = None) -> LeadProfile:
        """
        Build the full lead profile of *domain*.

        The company lookup only runs when the crawl chose a CNPJ.
        Raises ValueError for an empty domain; every network failure just leaves gaps.
        """
        normalized = normalize_domain(domain)
        if not normalized:
            raise ValueError("domain is required, e.g. 'example.com.br'")
        if session is None:
            async with self._session() as own:
                return await self.inspect(normalized, own)

        logger.info("Inspecting %s", normalized)
        fetcher = Fetcher(session, self.config)
        site = await SiteCrawler(self.config, fetcher).crawl(normalized)
        tech = await BuiltWithClient(fetcher).lookup(normalized)
        classification = classify_technologies(tech.tech)
        company = None
        if site.chosen_identifier:
            company = await CompanyLookupClient(fetcher).lookup(site.chosen_identifier)
        return build_profile(normalized, site, tech, classification, company)


async def inspect_domain(domain: str, config: ScoutConfig) -> LeadProfile:
    """Module-level shortcut used by the CLI."""
    return await Engine(config).inspect(domain)
