"""Fetching, parsing and batch concurrency for the ingest pipeline."""

from .coordinator import CardProcessor, PipelineCoordinator
from .fetcher import RecordFetcher, StatusClass, classify_status
from .language import resolve_language
from .parser import CardParser, parse_power_toughness
from .partition import DEFAULT_BATCH_SIZE, partition
from .symbols import decode_mana_label
from .thread_pool import BatchThreadPool, CompletionLatch
from .worker import BatchSummary, BundleOutcome, FetchWorker

__all__ = [
    "BatchSummary",
    "BatchThreadPool",
    "BundleOutcome",
    "CardParser",
    "CardProcessor",
    "CompletionLatch",
    "DEFAULT_BATCH_SIZE",
    "FetchWorker",
    "PipelineCoordinator",
    "RecordFetcher",
    "StatusClass",
    "classify_status",
    "decode_mana_label",
    "parse_power_toughness",
    "partition",
    "resolve_language",
]
