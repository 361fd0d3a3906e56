# File: tests/conftest.py
from __future__ import annotations

import asyncio
import hashlib
from collections import Counter
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

import pytest
import pytest_asyncio
from aiohttp import web

from url_hasher.config import HasherConfig

#: request timeout used by tests, far below the production default
TEST_TIMEOUT: float = 0.5
#: how long the slow endpoint waits before answering (beyond TEST_TIMEOUT)
SLOW_SLEEP: float = 1.5
#: delay of the endpoint used to check that workers overlap
PAUSE: float = 0.3

BODIES: dict[str, bytes] = {
    "/aaa": b"aaa",
    "/bbb": b"bbb",
    "/ccc": b"ccc",
    "/testrequest1": b"Sed ut perspiciatis unde omnis iste natus error",
    "/testrequest2": b"quae ab illo inventore veritatis et quasi architecto",
    "/testrequest3": b"aspernatur aut odit aut fugit, sed quia consequuntur",
}


def md5_hex(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


@dataclass
class DigestServer:
    """A running test server: its base URL and the number of requests per path."""

    base: str
    hits: Counter = field(default_factory=Counter)

    def url(self, path: str) -> str:
        return f"{self.base}{path}"


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def digest_server(unused_tcp_port: int) -> AsyncIterator[DigestServer]:
    hits: Counter = Counter()

    @web.middleware
    async def count_hits(request, handler):
        hits[request.path] += 1
        return await handler(request)

    app = web.Application(middlewares=[count_hits])

    async def handle_body(request):
        return web.Response(body=BODIES[request.path])

    async def handle_slow(_):
        await asyncio.sleep(SLOW_SLEEP)
        return web.Response(body=b"too late")

    async def handle_pause(_):
        await asyncio.sleep(PAUSE)
        return web.Response(body=b"paused")

    for path in BODIES:
        app.router.add_get(path, handle_body)
    app.router.add_get("/slow", handle_slow)
    app.router.add_get("/pause/{n}", handle_pause)

    async for base in _serve_app(app, unused_tcp_port):
        yield DigestServer(base=base, hits=hits)


@pytest.fixture()
def refused_url(unused_tcp_port_factory) -> str:
    """URL of a port nothing listens on."""
    return f"http://127.0.0.1:{unused_tcp_port_factory()}/nothing"


@pytest.fixture()
def fast_config() -> HasherConfig:
    """Config with a short request timeout."""
    return HasherConfig(request_timeout=TEST_TIMEOUT)
