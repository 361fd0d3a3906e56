"""url_hasher.fetcher: work channel, fetch workers and the dispatcher that drives them."""

from .channel import WorkChannel
from .dispatcher import Batch, Dispatcher
from .models import FetchFailure, FetchSuccess, Outcome, ValidationOutcome
from .worker import FetchWorker

__all__ = [
    "Batch",
    "Dispatcher",
    "FetchFailure",
    "FetchSuccess",
    "FetchWorker",
    "Outcome",
    "ValidationOutcome",
    "WorkChannel",
]
