"""Hand finished cards to the store and count successful writes."""

from __future__ import annotations

from threading import Lock

import structlog

from ..cards import CardRecord
from .base import CardStore


class WriteCounter:
    """Thread-safe count of successful upserts, read by the caller for reporting."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class CardSink:
    """Shared by every worker; the wrapped store owns its concurrency discipline."""

    def __init__(self, store: CardStore, logger: structlog.BoundLogger | None = None) -> None:
        self.store = store
        self.counter = WriteCounter()
        self.logger = logger or structlog.get_logger("gatherer_ingest.sink")

    @property
    def records_written(self) -> int:
        return self.counter.value

    def write(self, record: CardRecord) -> bool:
        try:
            success = self.store.upsert(record)
        except Exception as exc:  # noqa: BLE001
            self.logger.error(
                "card_save_failed", identifier=record.identifier, name=record.name, error=str(exc)
            )
            return False
        if not success:
            self.logger.error("card_save_failed", identifier=record.identifier, name=record.name)
            return False
        total = self.counter.increment()
        self.logger.debug(
            "card_saved", identifier=record.identifier, name=record.name, records_written=total
        )
        return True


__all__ = ["CardSink", "WriteCounter"]
