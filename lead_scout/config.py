"""
Loading and validation of the LeadScout configuration.
Pydantic describes the schema; values come from YAML/JSON plus environment overrides.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

__all__ = (
    "DEFAULT_PATHS",
    "DEFAULT_KEYWORDS",
    "ScoringConfig",
    "BuiltWithConfig",
    "CompanyLookupConfig",
    "ScoutConfig",
    "load_config",
    "apply_env",
)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0 Safari/537.36"
)

_PATH_STEMS: Tuple[str, ...] = (
    "/contato",
    "/fale-conosco",
    "/atendimento",
    "/institucional",
    "/sobre",
    "/quem-somos",
    "/termos",
    "/termos-de-uso",
    "/politica-de-privacidade",
    "/privacidade",
    "/politica",
    "/faq",
    "/trocas-e-devolucoes",
    "/politica-de-reembolso",
    "/reembolso",
    "/envio-e-entrega",
    "/frete-e-entrega",
    "/politica-de-envio",
    "/shipping",
    "/refund",
    "/returns",
)

#: Every stem with and without trailing slash, in catalog order.
DEFAULT_PATHS: Tuple[str, ...] = tuple(p for stem in _PATH_STEMS for p in (stem, stem + "/"))

DEFAULT_KEYWORDS: Tuple[str, ...] = (
    "cnpj",
    "razão social",
    "razao social",
    "inscrição",
    "inscricao",
    "empresa",
    "ltda",
    "me",
    "eireli",
    "endereço",
    "endereco",
    "contato",
    "institucional",
    "termos",
    "privacidade",
    "reembolso",
    "trocas",
    "devol",
    "footer",
    "rodap",
)


class ScoringConfig(BaseModel):
    """Knobs of the CNPJ disambiguation heuristic."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    window: int = Field(220, ge=0, description="Characters inspected on each side of a match.")
    keyword_points: int = Field(5, description="Points per keyword found in the window.")
    footer_bonus: int = Field(3, description="Extra points when the window mentions 'footer'.")
    keywords: Tuple[str, ...] = Field(DEFAULT_KEYWORDS, description="Company-context keywords.")

    @field_validator("keywords")
    def _lower_keywords(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(k.lower() for k in v if k)


class BuiltWithConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key: Optional[str] = None
    url: str = "https://api.builtwith.com/v20/api.json"


class CompanyLookupConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: Optional[str] = None
    api_key: Optional[str] = None
    path_template: str = "/cnpj/{cnpj}"
    auth_header: str = "Authorization"
    auth_prefix: str = "Bearer"


class ScoutConfig(BaseModel):
    """Configuration shared by every crawl and inspection of one process."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(15.0, gt=0, description="Timeout for a single request (seconds).")
    max_extra_links: int = Field(12, ge=0, description="Discovered links fetched per crawl.")
    min_body_length: int = Field(40, ge=0, description="Shorter bodies count as blocked pages.")
    user_agent: str = Field(BROWSER_USER_AGENT, min_length=1)
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    accept_language: str = "pt-BR,pt;q=0.9,en;q=0.8"
    debug_fetch: bool = Field(False, description="Log every fetch outcome.")
    paths: Tuple[str, ...] = Field(DEFAULT_PATHS, description="Path catalog fetched on every crawl.")
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    builtwith: BuiltWithConfig = Field(default_factory=BuiltWithConfig)
    company_lookup: CompanyLookupConfig = Field(default_factory=CompanyLookupConfig)
    api_key: Optional[str] = Field(None, description="Bearer token required by the web app.")
    host: str = "0.0.0.0"
    port: int = Field(3000, gt=0, lt=65536)

    @field_validator("paths")
    def _leading_slash(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(p if p.startswith("/") else "/" + p for p in v)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def apply_env(config: ScoutConfig, environ: Optional[Mapping[str, str]] = None) -> ScoutConfig:
    """Return a copy of *config* with the supported environment variables applied."""
    env = os.environ if environ is None else environ
    update: dict[str, Any] = {}

    if env.get("REQUEST_TIMEOUT_MS"):
        update["timeout"] = int(env["REQUEST_TIMEOUT_MS"]) / 1000
    if env.get("MAX_EXTRA_LINKS"):
        update["max_extra_links"] = int(env["MAX_EXTRA_LINKS"])
    if "DEBUG_FETCH" in env:
        update["debug_fetch"] = env["DEBUG_FETCH"] == "1"
    if env.get("ACTION_API_KEY"):
        update["api_key"] = env["ACTION_API_KEY"]
    if env.get("PORT"):
        update["port"] = int(env["PORT"])

    if env.get("BUILTWITH_API_KEY"):
        update["builtwith"] = config.builtwith.model_copy(update={"api_key": env["BUILTWITH_API_KEY"]})

    company: dict[str, Any] = {}
    for var, field in (
        ("CNPJBIZ_BASE_URL", "base_url"),
        ("CNPJBIZ_API_KEY", "api_key"),
        ("CNPJBIZ_PATH_TEMPLATE", "path_template"),
        ("CNPJBIZ_AUTH_HEADER", "auth_header"),
    ):
        if env.get(var):
            company[field] = env[var]
    # an explicitly empty prefix is meaningful (bare key)
    if "CNPJBIZ_AUTH_PREFIX" in env:
        company["auth_prefix"] = env["CNPJBIZ_AUTH_PREFIX"]
    if company:
        update["company_lookup"] = config.company_lookup.model_copy(update=company)

    if not update:
        return config
    data = config.model_dump()
    for key, value in update.items():
        data[key] = value.model_dump() if isinstance(value, BaseModel) else value
    # re-validated: bad environment values fail like bad config files
    return ScoutConfig.model_validate(data)


def load_config(
    path: Union[str, Path, None] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ScoutConfig:
    """
    Read YAML or JSON and return a validated ScoutConfig with environment overrides applied.
    Without *path* the default file is used when it exists, built-in defaults otherwise.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return apply_env(ScoutConfig(), environ)
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return apply_env(ScoutConfig(**data), environ)
