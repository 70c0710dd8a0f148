"""Technology profile of a domain from the BuiltWith JSON API."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional
from urllib.parse import urlencode

from lead_scout.config import BuiltWithConfig
from lead_scout.crawler.fetcher import Fetcher
from lead_scout.logger import logger
from lead_scout.utils import unique


@dataclass(slots=True)
class TechLookup:
    ok: bool
    tech: List[str] = field(default_factory=list)


def _get(obj: Any, *keys: str) -> Any:
    """First present key of a dict, tolerant to the API's mixed key casing."""
    if not isinstance(obj, dict):
        return None
    for key in keys:
        if obj.get(key) is not None:
            return obj[key]
    return None


def technology_names(payload: Any) -> List[str]:
    """Names under ``Results[].Result.Paths[].Technologies[].Name``, de-duplicated."""
    names: List[str] = []
    for res in _get(payload, "Results", "results") or []:
        result = _get(res, "Result", "result")
        for path in _get(result, "Paths", "paths") or []:
            for tech in _get(path, "Technologies", "technologies") or []:
                name = _get(tech, "Name", "name")
                if isinstance(name, str):
                    names.append(name)
    return unique(names)


class BuiltWithClient:
    def __init__(self, fetcher: Fetcher, config: Optional[BuiltWithConfig] = None) -> None:
        self.fetcher = fetcher
        self.config = config or fetcher.config.builtwith

    async def lookup(self, domain: str) -> TechLookup:
        if not self.config.api_key:
            logger.debug("BuiltWith lookup skipped: no API key")
            return TechLookup(ok=False)

        url = f"{self.config.url}?{urlencode({'KEY': self.config.api_key, 'LOOKUP': domain})}"
        data = await self.fetcher.fetch_json(url)
        if data is None:
            logger.warning("BuiltWith lookup failed for %s", domain)
            return TechLookup(ok=False)
        return TechLookup(ok=True, tech=technology_names(data))
