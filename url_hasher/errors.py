"""Exception hierarchy and failure taxonomy for url_hasher."""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    """Why a URL did not produce a digest."""

    TRANSPORT = "transport"
    BODY_READ = "body_read"
    VALIDATION = "validation"
    PARAMETER = "parameter"


class UrlHasherError(Exception):
    """Base exception of the package."""

    kind: FailureKind | None = None


class ParameterError(UrlHasherError, ValueError):
    """Batch parameters rejected before any work is started."""

    kind = FailureKind.PARAMETER


class ChannelClosed(UrlHasherError):
    """Raised by a work channel that has been closed (and drained, for readers)."""


__all__ = ["FailureKind", "UrlHasherError", "ParameterError", "ChannelClosed"]
