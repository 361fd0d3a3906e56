# url_hasher/fetcher/dispatcher.py
"""
Dispatcher: starts a pool of fetch workers around one work channel and feeds it.

::

    async with Dispatcher(worker_count=3, config=cfg) as dispatcher:
        batch = dispatcher.run(urls)
        async for outcome in collect(batch):
            ...

The work channel and both output queues are bounded at ``worker_count``.
The collector has to drain ``batch.results`` and ``batch.errors`` while the
batch runs; workers wait on a full output queue otherwise.
"""
from __future__ import annotations

import asyncio
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Sequence

from aiohttp import ClientSession, ClientTimeout

from url_hasher.config import HasherConfig
from url_hasher.errors import ParameterError
from url_hasher.fetcher.channel import WorkChannel
from url_hasher.fetcher.models import FetchFailure, FetchSuccess, Outcome
from url_hasher.fetcher.worker import FetchWorker
from url_hasher.logger import get_logger

__all__ = ("Batch", "Dispatcher")


@dataclass(slots=True)
class Batch:
    """One dispatched URL list: the two outcome streams and the tasks producing them."""

    results: asyncio.Queue[FetchSuccess]
    errors: asyncio.Queue[FetchFailure]
    size: int
    tasks: List[asyncio.Task] = field(default_factory=list, repr=False)
    carried: Deque[Outcome] = field(default_factory=deque, repr=False)
    started: float = field(default_factory=time.monotonic)

    @property
    def done(self) -> bool:
        return all(task.done() for task in self.tasks)

    async def join(self) -> None:
        """Wait for the feeder and every worker to finish."""
        await asyncio.gather(*self.tasks)


class Dispatcher:
    """Owns the HTTP session and runs batches of URLs through ``worker_count`` workers."""

    def __init__(self, worker_count: int, config: Optional[HasherConfig] = None) -> None:
        if worker_count < 1:
            raise ParameterError("Invalid number of parallel workers")
        self.worker_count = worker_count
        self.config = config or HasherConfig()
        self.session: Optional[ClientSession] = None
        self.logger = get_logger("dispatcher")
        self._batches: List[Batch] = []

    async def __aenter__(self) -> Dispatcher:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.request_timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cancel unfinished batch tasks, wait for all of them and close the session."""
        tasks = [task for batch in self._batches for task in batch.tasks]
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._batches.clear()
        if self.session and not self.session.closed:
            await self.session.close()

    def run(self, urls: Sequence[str]) -> Batch:
        """Start the workers and the feeder for *urls*; return immediately."""
        if self.session is None or self.session.closed:
            raise RuntimeError("Session not initialized")
        urls = list(urls)
        channel = WorkChannel(self.worker_count)
        batch = Batch(
            results=asyncio.Queue(maxsize=self.worker_count),
            errors=asyncio.Queue(maxsize=self.worker_count),
            size=len(urls),
        )
        workers = [
            FetchWorker(self.session, self.config, name=f"worker-{idx}")
            for idx in range(self.worker_count)
        ]
        batch.tasks.extend(
            asyncio.create_task(worker.run(channel, batch.results, batch.errors), name=worker.name)
            for worker in workers
        )
        batch.tasks.append(asyncio.create_task(self._submit(channel, urls), name="feeder"))
        self._batches.append(batch)
        self.logger.info("Dispatching %d URL(s) to %d worker(s)", len(urls), self.worker_count)
        return batch

    async def _submit(self, channel: WorkChannel, urls: Sequence[str]) -> None:
        try:
            for url in urls:
                await channel.put(url)
        finally:
            channel.close()
