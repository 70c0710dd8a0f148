"""
HTTP front end of LeadScout (aiohttp.web).

Routes:
  GET  /health         liveness probe
  POST /lead/inspect   body {"domain": "loja.com.br"} -> lead profile JSON

When ``api_key`` is configured, /lead/inspect requires ``Authorization: Bearer <key>``.
"""
from __future__ import annotations

from typing import AsyncIterator, Awaitable, Callable, Optional

from aiohttp import ClientSession, ClientTimeout, web

from lead_scout.config import ScoutConfig
from lead_scout.engine import Engine
from lead_scout.logger import logger
from lead_scout.utils import normalize_domain

ENGINE_KEY = web.AppKey("engine", Engine)
CONFIG_KEY = web.AppKey("config", ScoutConfig)
SESSION_KEY = web.AppKey("session", ClientSession)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def require_api_key(handler: _Handler) -> _Handler:
    async def wrapper(request: web.Request) -> web.StreamResponse:
        expected = request.app[CONFIG_KEY].api_key
        if expected and request.headers.get("Authorization", "") != f"Bearer {expected}":
            return web.json_response({"error": "Unauthorized"}, status=401)
        return await handler(request)

    return wrapper


async def health(_: web.Request) -> web.Response:
    return web.json_response({"ok": True, "message": "LeadScout online"})


@require_api_key
async def inspect_lead(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except ValueError:
        body = None
    raw = body.get("domain") if isinstance(body, dict) else None
    domain = normalize_domain(raw if isinstance(raw, str) else None)
    if not domain:
        return web.json_response({"error": "Send { domain: 'example.com.br' }"}, status=400)

    profile = await request.app[ENGINE_KEY].inspect(domain, request.app[SESSION_KEY])
    return web.json_response(profile.to_dict())


async def _client_session(app: web.Application) -> AsyncIterator[None]:
    config = app[CONFIG_KEY]
    async with ClientSession(timeout=ClientTimeout(total=config.timeout * 2)) as session:
        app[SESSION_KEY] = session
        yield


def create_app(config: ScoutConfig, engine: Optional[Engine] = None) -> web.Application:
    app = web.Application()
    app[CONFIG_KEY] = config
    app[ENGINE_KEY] = engine or Engine(config)
    app.cleanup_ctx.append(_client_session)
    app.router.add_get("/health", health)
    app.router.add_post("/lead/inspect", inspect_lead)
    return app


def run(config: ScoutConfig, host: Optional[str] = None, port: Optional[int] = None) -> None:
    host = host or config.host
    port = port or config.port
    logger.info("Server running on %s:%d", host, port)
    web.run_app(create_app(config), host=host, port=port, print=None)
