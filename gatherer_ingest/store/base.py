"""Card store Service Provider Interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ..cards import CardRecord


class CardStore(ABC):
    """Uniform persistence contract; implementations must accept concurrent calls."""

    @abstractmethod
    def upsert(self, record: CardRecord) -> bool:
        """Insert or replace the card keyed by its identifier."""

    def upsert_many(self, records: Iterable[CardRecord]) -> int:
        return sum(1 for record in records if self.upsert(record))

    @abstractmethod
    def list_known_identifiers(self) -> list[int]:
        """Return every stored identifier in ascending order."""

    @abstractmethod
    def count(self) -> int:
        """Number of stored cards."""

    @abstractmethod
    def close(self) -> None:
        """Release underlying resources."""


__all__ = ["CardStore"]
