# lead_scout/crawler/fetcher.py
"""
Fetcher module: one bounded HTTP GET per call, browser-like headers, cancellation on timeout.
"""
from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Mapping, Optional

from aiohttp import ClientError, ClientSession

from lead_scout.config import ScoutConfig
from lead_scout.crawler.models import FetchOutcome
from lead_scout.logger import logger

_JSON_ACCEPT = "application/json,text/plain,*/*"


class Fetcher:
    """Sequential-friendly GET helper that never raises: every failure becomes a not-ok outcome."""

    def __init__(self, session: ClientSession, config: ScoutConfig) -> None:
        self.session = session
        self.config = config

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": self.config.accept,
            "Accept-Language": self.config.accept_language,
        }

    async def fetch(self, url: str) -> FetchOutcome:
        """
        GET *url* following redirects.

        The outcome carries content only for a 2xx response whose body is at least
        ``config.min_body_length`` characters long.
        """
        try:
            status, text, ctype = await asyncio.wait_for(
                self._get(url, self.headers), timeout=self.config.timeout
            )
        except asyncio.TimeoutError:
            return self._failed(url, f"timeout after {self.config.timeout:.1f}s")
        except (ClientError, UnicodeDecodeError, ValueError, OSError) as exc:
            return self._failed(url, f"{type(exc).__name__}: {exc}")

        if self.config.debug_fetch:
            logger.info("[fetch] %s %s len=%d ct=%s", status, url, len(text), ctype)

        if not 200 <= status < 300:
            return FetchOutcome(url, status=status, error=f"HTTP {status}")
        if not text:
            return FetchOutcome(url, status=status, error="empty body")
        if len(text) < self.config.min_body_length:
            return FetchOutcome(url, status=status, error=f"body too short ({len(text)} chars)")
        return FetchOutcome(url, status=status, content=text)

    async def fetch_json(self, url: str, headers: Optional[Mapping[str, str]] = None) -> Optional[Any]:
        """GET *url* and decode the body as JSON; ``None`` on any failure."""
        merged = {**(headers or {}), "User-Agent": self.config.user_agent, "Accept": _JSON_ACCEPT}
        try:
            status, text, _ = await asyncio.wait_for(self._get(url, merged), timeout=self.config.timeout)
        except asyncio.TimeoutError:
            self._failed(url, f"timeout after {self.config.timeout:.1f}s")
            return None
        except (ClientError, UnicodeDecodeError, ValueError, OSError) as exc:
            self._failed(url, f"{type(exc).__name__}: {exc}")
            return None

        if self.config.debug_fetch:
            logger.info("[fetch-json] %s %s len=%d", status, url, len(text))

        if not 200 <= status < 300 or not text:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.debug("Invalid JSON from %s", url)
            return None

    async def _get(self, url: str, headers: Mapping[str, str]) -> tuple[int, str, str]:
        async with self.session.get(url, headers=dict(headers), allow_redirects=True) as resp:
            text = await resp.text(errors="replace")
            return resp.status, text, resp.headers.get("Content-Type", "")

    def _failed(self, url: str, reason: str) -> FetchOutcome:
        if self.config.debug_fetch:
            logger.info("[fetch-error] %s -> %s", url, reason)
        return FetchOutcome(url, error=reason)
