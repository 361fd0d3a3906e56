# url_hasher/fetcher/models.py
"""
Data models for the url_hasher fetch pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from url_hasher.errors import FailureKind


@dataclass(slots=True)
class ValidationOutcome:
    """Valid and invalid URLs of one input list, each in input order."""

    valid: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class FetchSuccess:
    """Digest of a fetched response body."""

    url: str
    digest: bytes
    status: int = 200

    @property
    def digest_hex(self) -> str:
        return self.digest.hex()

    def __str__(self) -> str:
        return f"{self.url} {self.digest_hex}"


@dataclass(slots=True, frozen=True)
class FetchFailure:
    """Reason a URL produced no digest."""

    url: str
    kind: FailureKind
    cause: str
    timed_out: bool = False

    def __str__(self) -> str:
        return f"{self.url}: {self.cause}"


Outcome = Union[FetchSuccess, FetchFailure]

__all__ = ["ValidationOutcome", "FetchSuccess", "FetchFailure", "Outcome"]
