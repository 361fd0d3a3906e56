# url_hasher/fetcher/worker.py
"""
Fetch worker: claims URLs from a work channel, downloads each body with a fixed
timeout and reports an MD5 digest or the reason the fetch failed.
"""
from __future__ import annotations

import asyncio
import hashlib

from aiohttp import ClientError, ClientSession, ClientTimeout

from url_hasher.config import HasherConfig
from url_hasher.errors import FailureKind
from url_hasher.fetcher.channel import WorkChannel
from url_hasher.fetcher.models import FetchFailure, FetchSuccess, Outcome
from url_hasher.logger import get_logger


def md5_digest(body: bytes) -> bytes:
    return hashlib.md5(body).digest()


def describe_error(exc: BaseException) -> str:
    """Human readable cause: exception type plus message when it has one."""
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


class FetchWorker:
    """Fetches and digests URLs one at a time; one instance per worker task."""

    def __init__(self, session: ClientSession, config: HasherConfig, name: str = "worker-0") -> None:
        self.session = session
        self.config = config
        self.name = name
        self._timeout = ClientTimeout(total=config.request_timeout)
        self.logger = get_logger("worker")

    async def fetch(self, url: str) -> Outcome:
        """GET *url* and digest the body; never raises for per-URL problems."""
        try:
            async with self.session.get(url, timeout=self._timeout) as resp:
                try:
                    body = await resp.read()
                except asyncio.TimeoutError:
                    return self._timed_out(url, FailureKind.BODY_READ, "reading the body")
                except ClientError as exc:
                    return self._failed(url, FailureKind.BODY_READ, exc)
                status = resp.status
        # TimeoutError is an OSError, so it has to be caught first
        except asyncio.TimeoutError:
            return self._timed_out(url, FailureKind.TRANSPORT, "awaiting the response")
        except (ClientError, ValueError, OSError) as exc:
            return self._failed(url, FailureKind.TRANSPORT, exc)

        # hashed off the event loop
        digest = await asyncio.to_thread(md5_digest, body)
        success = FetchSuccess(url, digest, status)
        self.logger.debug("%s: %s -> %s (HTTP %d, %d bytes)", self.name, url, success.digest_hex, status, len(body))
        return success

    async def run(
        self,
        channel: WorkChannel,
        results: asyncio.Queue[FetchSuccess],
        errors: asyncio.Queue[FetchFailure],
    ) -> int:
        """Process URLs until *channel* is closed and drained; return how many were handled."""
        processed = 0
        async for url in channel:
            outcome = await self.fetch(url)
            if isinstance(outcome, FetchSuccess):
                await results.put(outcome)
            else:
                await errors.put(outcome)
            processed += 1
        self.logger.debug("%s: channel closed after %d URL(s)", self.name, processed)
        return processed

    def _failed(self, url: str, kind: FailureKind, exc: BaseException) -> FetchFailure:
        self.logger.info("%s: %s failed (%s): %s", self.name, url, kind.value, exc)
        return FetchFailure(url, kind, describe_error(exc))

    def _timed_out(self, url: str, kind: FailureKind, stage: str) -> FetchFailure:
        cause = f"timeout of {self.config.request_timeout:g}s exceeded while {stage}"
        self.logger.info("%s: %s failed (%s): %s", self.name, url, kind.value, cause)
        return FetchFailure(url, kind, cause, timed_out=True)
