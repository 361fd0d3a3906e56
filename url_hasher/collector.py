# File: url_hasher/collector.py
"""url_hasher.collector: multiplexed drain of a batch's outcome streams and report aggregation."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, TypedDict

from url_hasher.errors import FailureKind
from url_hasher.fetcher.dispatcher import Batch
from url_hasher.fetcher.models import FetchSuccess, Outcome
from url_hasher.logger import get_logger

logger = get_logger("collector")


class ResultInfo(TypedDict):
    """A digested URL."""

    url: str
    digest: str
    status: int


class FailureInfo(TypedDict):
    """A URL that was not digested."""

    url: str
    kind: str
    cause: str


async def collect(batch: Batch, expected: Optional[int] = None) -> AsyncIterator[Outcome]:
    """Yield outcomes of *batch* as they arrive until *expected* were seen.

    *expected* defaults to ``batch.size``. Both streams are awaited at once, so
    whichever has an outcome ready is served first; no ordering across URLs is
    implied. An outcome read past *expected* is kept on ``batch.carried`` and
    served first by the next ``collect`` call on the same batch.
    """
    remaining = batch.size if expected is None else expected
    while remaining > 0 and batch.carried:
        remaining -= 1
        yield batch.carried.popleft()

    getters: Dict[asyncio.Task, asyncio.Queue] = {}
    try:
        while remaining > 0:
            for queue in (batch.results, batch.errors):
                if queue not in getters.values():
                    getters[asyncio.create_task(queue.get())] = queue
            done, _ = await asyncio.wait(set(getters), return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                del getters[task]
                if remaining > 0:
                    remaining -= 1
                    yield task.result()
                else:
                    batch.carried.append(task.result())
    finally:
        for task in getters:
            task.cancel()
        # a read that completed before the cancel still holds its outcome
        for result in await asyncio.gather(*getters, return_exceptions=True):
            if not isinstance(result, BaseException):
                batch.carried.append(result)


@dataclass(slots=True)
class BatchReport:
    """Everything one batch run produced."""

    results: List[ResultInfo] = field(default_factory=list)
    failures: List[FailureInfo] = field(default_factory=list)
    invalid: List[FailureInfo] = field(default_factory=list)

    @property
    def outcome_count(self) -> int:
        return len(self.results) + len(self.failures)

    def add(self, outcome: Outcome) -> None:
        if isinstance(outcome, FetchSuccess):
            self.results.append(
                {"url": outcome.url, "digest": outcome.digest_hex, "status": outcome.status}
            )
        else:
            self.failures.append(
                {"url": outcome.url, "kind": outcome.kind.value, "cause": outcome.cause}
            )

    def as_dict(self) -> Dict[str, Any]:
        return {"results": self.results, "failures": self.failures, "invalid": self.invalid}

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_outcomes(outcomes: Iterable[Outcome], invalid: Iterable[str] = ()) -> BatchReport:
    """Build a BatchReport from collected outcomes and the URLs rejected before dispatch."""
    report = BatchReport()
    for outcome in outcomes:
        report.add(outcome)
    report.invalid = [
        {"url": url, "kind": FailureKind.VALIDATION.value, "cause": "invalid url"} for url in invalid
    ]
    logger.debug(
        "Aggregated %d result(s), %d failure(s), %d invalid URL(s)",
        len(report.results),
        len(report.failures),
        len(report.invalid),
    )
    return report


__all__ = ["collect", "BatchReport", "aggregate_outcomes", "ResultInfo", "FailureInfo"]
