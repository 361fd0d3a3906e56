# File: url_hasher/utils.py
"""url_hasher.utils: URL repair, syntactic validation and de-duplication helpers."""

from __future__ import annotations

import re
from typing import Collection, Iterable, List, Sequence
from urllib.parse import urlsplit

from url_hasher.fetcher.models import ValidationOutcome
from url_hasher.logger import get_logger

__all__: Sequence[str] = (
    "DEFAULT_SCHEME",
    "RECOGNIZED_SCHEMES",
    "has_recognized_scheme",
    "repair_urls",
    "is_valid_url",
    "validate_urls",
    "remove_duplicates",
)

DEFAULT_SCHEME = "http://"
RECOGNIZED_SCHEMES: tuple[str, ...] = ("http://", "https://")

# RFC 3986 scheme followed by an authority
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")
_FORBIDDEN_RE = re.compile(r"[\s\x00-\x1f\x7f]")

logger = get_logger("utils")


def has_recognized_scheme(url: str, recognized_schemes: Iterable[str] = RECOGNIZED_SCHEMES) -> bool:
    """True when *url* starts with one of the recognized scheme prefixes."""
    return url.startswith(tuple(recognized_schemes))


def repair_urls(
    urls: Iterable[str],
    default_scheme: str = DEFAULT_SCHEME,
    recognized_schemes: Iterable[str] = RECOGNIZED_SCHEMES,
) -> List[str]:
    """Prefix every URL lacking a recognized scheme with *default_scheme*.

    Only the repaired entries are returned: URLs that already carry a
    recognized prefix are left out of the result.
    """
    schemes = tuple(recognized_schemes)
    repaired = [default_scheme + url for url in urls if not has_recognized_scheme(url, schemes)]
    logger.debug("Repaired %d URL(s) with scheme %s", len(repaired), default_scheme)
    return repaired


def is_valid_url(url: str) -> bool:
    """Syntactic check: scheme, ``://``, a host and a sane port; no whitespace."""
    if not url or _FORBIDDEN_RE.search(url) or not _SCHEME_RE.match(url):
        return False
    try:
        parts = urlsplit(url)
        # raises ValueError for a non-numeric or out-of-range port
        parts.port
    except ValueError:
        return False
    return bool(parts.hostname)


def validate_urls(urls: Iterable[str]) -> ValidationOutcome:
    """Split *urls* into valid and invalid ones, keeping input order in both."""
    outcome = ValidationOutcome()
    for url in urls:
        (outcome.valid if is_valid_url(url) else outcome.invalid).append(url)
    logger.debug("Validated URLs: %d valid, %d invalid", len(outcome.valid), len(outcome.invalid))
    return outcome


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Remove duplicate URLs, keeping the first occurrence of each."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
