"""Service operations wiring configuration, the pipeline and the card store together."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Sequence

import structlog

from .config import ConfigRepository, IngestConfig
from .engine import BatchSummary, PipelineCoordinator
from .engine.coordinator import FetcherFactory
from .logging_conf import configure_logging
from .store import CardSink, CardStore


@dataclass(slots=True)
class RunSummary:
    """Aggregated outcome of one pipeline run."""

    requested: int
    batches: int = 0
    parsed: int = 0
    missing: int = 0
    failed: int = 0
    written: int = 0
    persist_failed: int = 0
    cancelled: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    elapsed_seconds: float = 0.0

    @classmethod
    def from_batches(
        cls,
        requested: int,
        batches: Sequence[BatchSummary],
        started_at: datetime,
        elapsed_seconds: float,
    ) -> "RunSummary":
        return cls(
            requested=requested,
            batches=len(batches),
            parsed=sum(batch.parsed for batch in batches),
            missing=sum(batch.missing for batch in batches),
            failed=sum(batch.failed for batch in batches),
            written=sum(batch.written for batch in batches),
            persist_failed=sum(batch.persist_failed for batch in batches),
            cancelled=any(batch.cancelled for batch in batches),
            started_at=started_at,
            elapsed_seconds=elapsed_seconds,
        )

    def as_dict(self) -> dict[str, object]:
        return {
            "requested": self.requested,
            "batches": self.batches,
            "parsed": self.parsed,
            "missing": self.missing,
            "failed": self.failed,
            "written": self.written,
            "persist_failed": self.persist_failed,
            "cancelled": self.cancelled,
            "started_at": self.started_at.isoformat(),
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }


class IngestOrchestrator:
    """Update or populate the card store from the remote card database."""

    def __init__(
        self,
        config_repository: ConfigRepository,
        store: CardStore,
        config: IngestConfig | None = None,
        fetcher_factory: FetcherFactory | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config_repository = config_repository
        self.config = config or config_repository.load_config()
        self.store = store
        self.logger = logger or configure_logging().bind(component="orchestrator")
        self.sink = CardSink(store)
        self.coordinator = PipelineCoordinator(
            self.config, self.sink, fetcher_factory=fetcher_factory
        )

    @property
    def records_written(self) -> int:
        return self.sink.records_written

    def cancel(self) -> None:
        self.coordinator.cancel()

    # ------------------------------------------------------------------
    def update_identifiers(self, identifiers: Iterable[int]) -> RunSummary:
        ids = list(identifiers)
        started_at = datetime.now(timezone.utc)
        clock = time.monotonic()
        self.logger.info("update_started", identifiers=len(ids))
        batches = self.coordinator.run(ids)
        summary = RunSummary.from_batches(
            len(ids), batches, started_at, time.monotonic() - clock
        )
        self.logger.info("update_finished", **summary.as_dict())
        return summary

    def update_identifier(self, identifier: int) -> RunSummary:
        return self.update_identifiers([identifier])

    def update_known(self) -> RunSummary:
        """Refresh every card already present in the store."""

        known = self.store.list_known_identifiers()
        self.logger.info("update_known", known=len(known))
        return self.update_identifiers(known)

    def populate(self) -> RunSummary:
        """Fetch every identifier below ``max_identifier`` the store does not hold yet."""

        known = set(self.store.list_known_identifiers())
        missing = [
            identifier
            for identifier in range(1, self.config.max_identifier)
            if identifier not in known
        ]
        self.logger.info(
            "populate_started",
            known=len(known),
            pending=len(missing),
            max_identifier=self.config.max_identifier,
        )
        return self.update_identifiers(missing)


__all__ = ["IngestOrchestrator", "RunSummary"]
