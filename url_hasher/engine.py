# File: url_hasher/engine.py
"""url_hasher.engine: batch entry point: parameter checks, URL preparation, dispatch and collection."""

from __future__ import annotations

import asyncio
import time
from contextlib import aclosing
from typing import AsyncIterator, List, Optional, Sequence

from url_hasher.collector import BatchReport, aggregate_outcomes, collect
from url_hasher.config import HasherConfig, load_config
from url_hasher.errors import ParameterError
from url_hasher.fetcher.dispatcher import Dispatcher
from url_hasher.fetcher.models import Outcome, ValidationOutcome
from url_hasher.logger import get_logger
from url_hasher.utils import has_recognized_scheme, remove_duplicates, repair_urls, validate_urls

__all__ = ["Engine", "validate_params", "prepare_urls", "start_batch"]

logger = get_logger("engine")


def validate_params(worker_count: int, urls: Sequence[str]) -> None:
    """Reject a batch that cannot run; raises ParameterError."""
    if worker_count < 1:
        raise ParameterError("Invalid number of parallel workers")
    if len(urls) == 0:
        raise ParameterError("List of urls to visit is empty")


def prepare_urls(urls: Sequence[str], config: HasherConfig) -> ValidationOutcome:
    """Validate *urls*, giving invalid ones a second chance after scheme repair.

    The returned ``valid`` list holds the originally valid URLs followed by the
    repaired ones; ``invalid`` holds the caller's original strings that failed
    both passes, in input order.
    """
    first = validate_urls(urls)
    if not first.invalid:
        valid = first.valid
        invalid: List[str] = []
    else:
        repairable = [
            url for url in first.invalid if not has_recognized_scheme(url, config.recognized_schemes)
        ]
        repaired_urls = repair_urls(repairable, config.default_scheme, config.recognized_schemes)
        repaired = dict(zip(repairable, repaired_urls))
        second = validate_urls(repaired_urls)
        still_invalid = set(second.invalid)
        valid = first.valid + second.valid
        invalid = [url for url in first.invalid if url not in repaired or repaired[url] in still_invalid]

    if config.deduplicate:
        valid = remove_duplicates(valid)
    for url in invalid:
        logger.info("Invalid url: %r", url)
    return ValidationOutcome(valid=valid, invalid=invalid)


class Engine:
    """Facade for the CLI and tests: configuration, URL preparation and batch runs."""

    @staticmethod
    def load_config(path: Optional[str]) -> HasherConfig:
        """Load a YAML/JSON config or fall back to defaults."""
        return load_config(path)

    def __init__(self, config: Optional[HasherConfig] = None) -> None:
        self.config = config or HasherConfig()

    def prepare(self, worker_count: int, urls: Sequence[str]) -> ValidationOutcome:
        """Check parameters, then split *urls* into dispatchable and invalid ones."""
        validate_params(worker_count, urls)
        return prepare_urls(urls, self.config)

    async def stream(self, worker_count: int, urls: Sequence[str]) -> AsyncIterator[Outcome]:
        """Fetch already validated *urls* and yield each outcome as soon as it is known."""
        if not urls:
            return
        async with Dispatcher(worker_count, self.config) as dispatcher:
            batch = dispatcher.run(urls)
            async with aclosing(collect(batch)) as outcomes:
                async for outcome in outcomes:
                    yield outcome
            await batch.join()
            logger.info(
                "Batch finished: %d outcome(s) in %.2f s", batch.size, time.monotonic() - batch.started
            )

    async def start_batch(self, worker_count: int, urls: Sequence[str]) -> BatchReport:
        """Prepare *urls*, fetch the valid ones and aggregate everything into a report."""
        prepared = self.prepare(worker_count, urls)
        outcomes = [outcome async for outcome in self.stream(worker_count, prepared.valid)]
        return aggregate_outcomes(outcomes, prepared.invalid)

    def run(self, worker_count: int, urls: Sequence[str]) -> BatchReport:
        """Synchronous wrapper around :meth:`start_batch`."""
        return asyncio.run(self.start_batch(worker_count, urls))


async def start_batch(
    worker_count: int, urls: Sequence[str], config: Optional[HasherConfig] = None
) -> BatchReport:
    """Run one batch with *config* (defaults when omitted) and return its report."""
    return await Engine(config).start_batch(worker_count, urls)
