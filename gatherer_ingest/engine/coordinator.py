"""Pipeline coordinator: one worker per batch, each paired with its own parser."""

from __future__ import annotations

from concurrent.futures import Future
from threading import Event
from typing import Callable, Sequence

import structlog

from ..cards import RawCardBundle
from ..config import IngestConfig
from ..logging_conf import component_logger
from ..store.sink import CardSink
from .fetcher import RecordFetcher
from .parser import CardParser
from .partition import partition
from .thread_pool import BatchThreadPool, CompletionLatch
from .worker import BatchSummary, BundleOutcome, FetchWorker, ResourceFetcher

FetcherFactory = Callable[[int], ResourceFetcher]


class CardProcessor:
    """Bundle channel of a single worker: parse, then hand the card to the sink."""

    def __init__(
        self,
        parser: CardParser,
        sink: CardSink,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.parser = parser
        self.sink = sink
        self.logger = logger or structlog.get_logger("gatherer_ingest.processor")

    def __call__(self, bundle: RawCardBundle) -> BundleOutcome:
        record = self.parser.parse(bundle)
        if record is None:
            self.logger.debug("card_missing", identifier=bundle.identifier)
            return BundleOutcome.MISSING
        if self.sink.write(record):
            return BundleOutcome.WRITTEN
        return BundleOutcome.WRITE_FAILED


class PipelineCoordinator:
    """Start every batch at once and block until each worker has counted down."""

    def __init__(
        self,
        config: IngestConfig,
        sink: CardSink,
        fetcher_factory: FetcherFactory | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.sink = sink
        self.logger = logger or structlog.get_logger("gatherer_ingest.coordinator")
        self._fetcher_factory = fetcher_factory or self._default_fetcher
        self._cancel = Event()

    def _default_fetcher(self, batch_index: int) -> ResourceFetcher:
        return RecordFetcher(self.config, logger=component_logger("fetcher", batch=batch_index))

    # ------------------------------------------------------------------
    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """Ask every running worker to stop after its current identifier."""

        self.logger.warning("pipeline_cancel_requested")
        self._cancel.set()

    def run(self, identifiers: Sequence[int]) -> list[BatchSummary]:
        self._cancel.clear()
        batches = partition(identifiers, self.config.batch_size)
        if not batches:
            self.logger.info("pipeline_empty")
            return []

        self.logger.info(
            "pipeline_started", identifiers=len(identifiers), batches=len(batches)
        )
        latch = CompletionLatch(len(batches))
        futures: list[Future[BatchSummary]] = []
        with BatchThreadPool(len(batches)) as pool:
            for index, batch in enumerate(batches):
                worker = self._build_worker(index, batch, latch)
                futures.append(pool.submit(worker.run))
            try:
                latch.wait()
            except KeyboardInterrupt:
                # workers stop after their current identifier; the pool exit joins them
                self.cancel()
                raise

        summaries = [
            self._collect(index, future, batch)
            for index, (future, batch) in enumerate(zip(futures, batches))
        ]
        self.logger.info(
            "pipeline_finished",
            batches=len(summaries),
            written=sum(summary.written for summary in summaries),
            cancelled=self.cancelled,
        )
        return summaries

    def _build_worker(self, index: int, batch: list[int], latch: CompletionLatch) -> FetchWorker:
        worker_logger = component_logger("worker", batch=index)
        processor = CardProcessor(
            CardParser(logger=component_logger("parser", batch=index)),
            self.sink,
            logger=worker_logger,
        )
        return FetchWorker(
            batch_index=index,
            identifiers=batch,
            fetcher=self._fetcher_factory(index),
            config=self.config,
            channel=processor,
            on_complete=latch.count_down,
            cancel_event=self._cancel,
            logger=worker_logger,
        )

    def _collect(
        self, index: int, future: Future[BatchSummary], batch: list[int]
    ) -> BatchSummary:
        try:
            return future.result()
        except Exception as exc:  # noqa: BLE001
            self.logger.error("batch_crashed", batch=index, error=str(exc))
            return BatchSummary(batch_index=index, requested=len(batch), failed=len(batch))


__all__ = ["CardProcessor", "FetcherFactory", "PipelineCoordinator"]
