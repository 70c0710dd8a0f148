"""Company record lookup by CNPJ through a configurable JSON HTTP service."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from lead_scout.config import CompanyLookupConfig
from lead_scout.crawler.fetcher import Fetcher
from lead_scout.logger import logger


@dataclass(slots=True)
class CompanyRecord:
    partners: List[Any] = field(default_factory=list)
    phones: List[Any] = field(default_factory=list)
    emails: List[Any] = field(default_factory=list)
    city: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _first(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


def _as_list(value: Any) -> List[Any]:
    if value is None or value == "":
        return []
    return list(value) if isinstance(value, (list, tuple)) else [value]


def parse_company_record(data: Dict[str, Any]) -> CompanyRecord:
    """Map the service's Portuguese or English field names onto :class:`CompanyRecord`."""
    address_pt = data.get("endereco") if isinstance(data.get("endereco"), dict) else {}
    address_en = data.get("address") if isinstance(data.get("address"), dict) else {}
    email = data.get("emails") or ([data["email"]] if data.get("email") else [])
    return CompanyRecord(
        partners=_as_list(_first(data, "partners", "socios", "qsa")),
        phones=_as_list(_first(data, "phones", "telefones")),
        emails=_as_list(email),
        city=_first(data, "city", "cidade") or address_pt.get("cidade") or address_en.get("city"),
    )


class CompanyLookupClient:
    def __init__(self, fetcher: Fetcher, config: Optional[CompanyLookupConfig] = None) -> None:
        self.fetcher = fetcher
        self.config = config or fetcher.config.company_lookup

    @property
    def enabled(self) -> bool:
        return bool(self.config.base_url and self.config.api_key)

    def build_url(self, cnpj: str) -> str:
        path = self.config.path_template.replace("{cnpj}", cnpj)
        if not path.startswith("/"):
            path = "/" + path
        return (self.config.base_url or "").rstrip("/") + path

    def auth_headers(self) -> Dict[str, str]:
        key = self.config.api_key or ""
        value = f"{self.config.auth_prefix} {key}" if self.config.auth_prefix else key
        return {self.config.auth_header: value}

    async def lookup(self, cnpj: str) -> Optional[CompanyRecord]:
        """Record for a 14-digit *cnpj*; ``None`` when disabled, not found or failing."""
        if not self.enabled:
            logger.debug("Company lookup skipped: base_url/api_key not configured")
            return None
        data = await self.fetcher.fetch_json(self.build_url(cnpj), self.auth_headers())
        if not isinstance(data, dict):
            logger.info("Company lookup returned nothing for %s", cnpj)
            return None
        return parse_company_record(data)
