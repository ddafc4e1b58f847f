"""Fetch worker: downloads the three resources of every identifier in one batch."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from threading import Event
from typing import Callable, Protocol, Sequence

import structlog

from ..cards import RawCardBundle
from ..config import IngestConfig


class ResourceFetcher(Protocol):
    def fetch(self, url: str) -> bytes | None: ...

    def close(self) -> None: ...


class BundleOutcome(str, Enum):
    """What happened to a bundle after it left the worker."""

    WRITTEN = "written"
    MISSING = "missing"
    WRITE_FAILED = "write_failed"


BundleChannel = Callable[[RawCardBundle], BundleOutcome]


@dataclass(slots=True)
class BatchSummary:
    batch_index: int
    requested: int
    processed: int = 0
    written: int = 0
    missing: int = 0
    failed: int = 0
    persist_failed: int = 0
    cancelled: bool = False

    @property
    def parsed(self) -> int:
        return self.written + self.persist_failed


class FetchWorker:
    """Process one batch strictly in order, then signal completion exactly once."""

    def __init__(
        self,
        batch_index: int,
        identifiers: Sequence[int],
        fetcher: ResourceFetcher,
        config: IngestConfig,
        channel: BundleChannel,
        on_complete: Callable[[], None],
        cancel_event: Event | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.batch_index = batch_index
        self.identifiers = list(identifiers)
        self.fetcher = fetcher
        self.config = config
        self.channel = channel
        self.on_complete = on_complete
        self.cancel_event = cancel_event
        self.logger = logger or structlog.get_logger("gatherer_ingest.worker").bind(
            batch=batch_index
        )

    def run(self) -> BatchSummary:
        summary = BatchSummary(batch_index=self.batch_index, requested=len(self.identifiers))
        self.logger.info("batch_started", size=len(self.identifiers))
        try:
            for identifier in self.identifiers:
                if self.cancel_event is not None and self.cancel_event.is_set():
                    summary.cancelled = True
                    self.logger.info("batch_cancelled", processed=summary.processed)
                    break
                self._process(identifier, summary)
                summary.processed += 1
        finally:
            try:
                self.fetcher.close()
            except Exception as exc:  # noqa: BLE001
                self.logger.error("fetcher_close_failed", error=str(exc))
            finally:
                self.on_complete()
            self.logger.info(
                "batch_finished",
                processed=summary.processed,
                written=summary.written,
                missing=summary.missing,
                failed=summary.failed,
            )
        return summary

    def fetch_bundle(self, identifier: int) -> RawCardBundle:
        self.logger.debug("loading_card", identifier=identifier)
        detail = self.fetcher.fetch(self.config.detail_url(identifier))
        image = self.fetcher.fetch(self.config.image_url(identifier))
        language = self.fetcher.fetch(self.config.language_url(identifier))
        return RawCardBundle(
            identifier=identifier,
            detail=detail or b"",
            image=image or b"",
            language=language or b"",
        )

    def _process(self, identifier: int, summary: BatchSummary) -> None:
        try:
            outcome = self.channel(self.fetch_bundle(identifier))
        except Exception as exc:  # noqa: BLE001
            summary.failed += 1
            self.logger.error(
                "card_processing_failed", identifier=identifier, error=str(exc), exc_info=True
            )
            return
        if outcome is BundleOutcome.WRITTEN:
            summary.written += 1
        elif outcome is BundleOutcome.MISSING:
            summary.missing += 1
        else:
            summary.persist_failed += 1


__all__ = ["BatchSummary", "BundleChannel", "BundleOutcome", "FetchWorker", "ResourceFetcher"]
