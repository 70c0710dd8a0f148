"""lead_scout.aggregator: assembly of a LeadProfile from crawl and enrichment results."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lead_scout.crawler.models import CrawlResult
from lead_scout.enrich.builtwith import TechLookup
from lead_scout.enrich.classifier import Classification
from lead_scout.enrich.company import CompanyRecord
from lead_scout.parser.entities import format_cnpj
from lead_scout.utils import unique


@dataclass(slots=True)
class LeadProfile:
    """Everything known about a domain after one inspection."""

    domain: str
    url: str
    ecommerce_platform: Optional[str] = None
    marketing_automation_tools: List[str] = field(default_factory=list)
    phones_found_on_site: List[str] = field(default_factory=list)
    emails_found_on_site: List[str] = field(default_factory=list)
    cnpj: Optional[str] = None
    cnpj_candidates: List[str] = field(default_factory=list)
    company: Optional[CompanyRecord] = None
    builtwith_technologies: List[str] = field(default_factory=list)
    sources: Dict[str, bool] = field(default_factory=dict)
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "url": self.url,
            "ecommerce_platform": self.ecommerce_platform,
            "marketing_automation_tools": list(self.marketing_automation_tools),
            "phones_found_on_site": list(self.phones_found_on_site),
            "emails_found_on_site": list(self.emails_found_on_site),
            "cnpj": self.cnpj,
            "cnpj_candidates": list(self.cnpj_candidates),
            "company": self.company.to_dict() if self.company else None,
            "builtwith_technologies": list(self.builtwith_technologies),
            "sources": dict(self.sources),
            "notes": list(self.notes),
        }

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def _notes(site: CrawlResult, tech: TechLookup, company: Optional[CompanyRecord]) -> List[str]:
    return [
        "Site visited." if site.crawled_successfully
        else "Site unreachable (https/http and www variants all failed).",
        "CNPJ found on site (best candidate)." if site.chosen_identifier
        else "CNPJ not found on site.",
        "BuiltWith queried." if tech.ok
        else "BuiltWith lookup failed or not configured (see logs with DEBUG_FETCH=1).",
        "Company record retrieved." if company
        else "Company record not retrieved (no CNPJ, not configured or lookup failed).",
    ]


def build_profile(
    domain: str,
    site: CrawlResult,
    tech: TechLookup,
    classification: Classification,
    company: Optional[CompanyRecord] = None,
) -> LeadProfile:
    """Merge the partial results of one inspection into a :class:`LeadProfile`."""
    return LeadProfile(
        domain=domain,
        url=site.base_url,
        ecommerce_platform=classification.ecommerce_platform,
        marketing_automation_tools=unique(classification.marketing_automation_tools),
        phones_found_on_site=list(site.phones),
        emails_found_on_site=list(site.emails),
        cnpj=format_cnpj(site.chosen_identifier) if site.chosen_identifier else None,
        cnpj_candidates=unique(format_cnpj(c) for c in site.identifier_candidates),
        company=company,
        builtwith_technologies=list(tech.tech),
        sources={"builtwith": tech.ok, "site": site.crawled_successfully, "company": company is not None},
        notes=_notes(site, tech, company),
    )
