# url_hasher/fetcher/channel.py
"""
Bounded, closable FIFO used to hand URLs from the dispatcher to fetch workers.

The channel holds at most ``capacity`` URLs; :meth:`WorkChannel.put` suspends
the producer while it is full. After :meth:`WorkChannel.close` no more URLs can
be submitted, readers drain what is left and then see :class:`ChannelClosed`
(or the end of ``async for``). Every URL put into the channel is returned by
exactly one :meth:`WorkChannel.get` call.
"""
from __future__ import annotations

import asyncio
from typing import AsyncIterator, Final, Union

from url_hasher.errors import ChannelClosed


class _Closed:
    """Marker queued behind the last URL."""

    def __repr__(self) -> str:
        return "<closed>"


_CLOSED: Final = _Closed()


class WorkChannel:
    """Single-producer, multi-consumer URL queue with an explicit close."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        # one extra slot keeps room for the close marker
        self._queue: asyncio.Queue[Union[str, _Closed]] = asyncio.Queue(maxsize=capacity + 1)
        self._capacity = capacity
        self._closed = False
        self._space = asyncio.Semaphore(capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        return self._closed

    async def put(self, url: str) -> None:
        if self._closed:
            raise ChannelClosed("put on a closed channel")
        await self._space.acquire()
        if self._closed:
            self._space.release()
            raise ChannelClosed("channel closed while waiting for space")
        self._queue.put_nowait(url)

    def close(self) -> None:
        """Stop accepting URLs; readers finish the backlog, then stop."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def get(self) -> str:
        item = await self._queue.get()
        if item is _CLOSED:
            # leave the marker for the next reader
            self._queue.put_nowait(_CLOSED)
            raise ChannelClosed("channel closed and drained")
        self._space.release()
        return item

    def __aiter__(self) -> AsyncIterator[str]:
        return self

    async def __anext__(self) -> str:
        try:
            return await self.get()
        except ChannelClosed:
            raise StopAsyncIteration from None
