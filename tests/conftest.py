# File: tests/conftest.py
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

import pytest
from aiohttp import web

from lead_scout.config import ScoutConfig
from lead_scout.crawler.models import FetchOutcome


class FakeFetcher:
    """
    In-memory stand-in for Fetcher: serves *pages* by exact URL, 404 for anything else.
    Records every requested URL in ``calls``.
    """

    def __init__(self, pages: Optional[Dict[str, str]] = None) -> None:
        self.pages = pages or {}
        self.calls: List[str] = []

    async def fetch(self, url: str) -> FetchOutcome:
        self.calls.append(url)
        content = self.pages.get(url)
        if content is None:
            return FetchOutcome(url, status=404, error="HTTP 404")
        return FetchOutcome(url, status=200, content=content)


@asynccontextmanager
async def serve_app(app: web.Application) -> AsyncIterator[str]:
    """Start *app* on a free localhost port, yield its base URL, clean up afterwards."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    host, port = runner.addresses[0][:2]
    try:
        yield f"http://{host}:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def basic_config() -> ScoutConfig:
    """ScoutConfig with short timeouts for network tests."""
    return ScoutConfig(timeout=2.0, max_extra_links=12)


@pytest.fixture()
def isolated_config() -> ScoutConfig:
    """ScoutConfig without path catalog, so only roots and discovered links are fetched."""
    return ScoutConfig(timeout=2.0, paths=())


@pytest.fixture()
def fake_fetcher_factory():
    return FakeFetcher


@pytest.fixture()
def app_server():
    return serve_app
