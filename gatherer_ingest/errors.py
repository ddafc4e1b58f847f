"""Exception hierarchy shared across the ingest pipeline."""

from __future__ import annotations


class IngestError(Exception):
    """Base class for all ingest failures."""


class FetchError(IngestError):
    """A remote resource could not be retrieved."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"{reason}: {url}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class RetryableFetchError(FetchError):
    """Server-side or socket-level failure worth another attempt."""


class FatalFetchError(FetchError):
    """Failure that another attempt will not fix."""


class CardParseError(IngestError):
    """A detail page had a name but lacked a required field."""

    def __init__(self, identifier: int, field: str) -> None:
        super().__init__(f"Card {identifier} is missing required field '{field}'")
        self.identifier = identifier
        self.field = field


class StoreError(IngestError):
    """Persistence layer failure."""


__all__ = [
    "CardParseError",
    "FatalFetchError",
    "FetchError",
    "IngestError",
    "RetryableFetchError",
    "StoreError",
]
