"""HTTP fetching with status classification and bounded retries."""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable

import httpx
import structlog

from ..config import IngestConfig
from ..errors import FatalFetchError, FetchError, RetryableFetchError


class StatusClass(str, Enum):
    """How a response status is treated by the retry loop."""

    OK = "ok"
    RETRYABLE = "retryable"
    FATAL = "fatal"


def classify_status(status_code: int) -> StatusClass:
    if status_code == 200:
        return StatusClass.OK
    if 500 <= status_code <= 599:
        return StatusClass.RETRYABLE
    return StatusClass.FATAL


class RecordFetcher:
    """Download one resource at a time, retrying transient failures.

    Each worker owns its own fetcher (and therefore its own ``httpx.Client``),
    so no connection state is shared between threads.
    """

    def __init__(
        self,
        config: IngestConfig,
        logger: structlog.BoundLogger | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.max_attempts = config.max_attempts
        self.retry_wait_seconds = config.retry_wait_seconds
        self.timeout = config.request_timeout
        self.logger = logger or structlog.get_logger("gatherer_ingest.fetcher")
        self._sleep = sleep
        headers = {"User-Agent": config.user_agent} if config.user_agent else None
        self._client = httpx.Client(follow_redirects=True, timeout=self.timeout, headers=headers)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RecordFetcher":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    def fetch(self, url: str) -> bytes | None:
        """Return the response body, or None when the resource is unavailable."""

        attempt = 0
        while True:
            attempt += 1
            try:
                return self._attempt(url)
            except RetryableFetchError as exc:
                if attempt >= self.max_attempts:
                    self.logger.error(
                        "fetch_gave_up",
                        url=url,
                        attempts=attempt,
                        status=exc.status_code,
                        error=exc.reason,
                    )
                    return None
                self.logger.warning(
                    "fetch_retry",
                    url=url,
                    attempt=attempt,
                    status=exc.status_code,
                    error=exc.reason,
                    wait_seconds=self.retry_wait_seconds,
                )
                self._sleep(self.retry_wait_seconds)
            except FatalFetchError as exc:
                self.logger.error(
                    "fetch_failed", url=url, attempt=attempt, status=exc.status_code, error=exc.reason
                )
                return None

    # ------------------------------------------------------------------
    def _attempt(self, url: str) -> bytes:
        try:
            response = self._client.request("GET", url, timeout=self.timeout)
        except (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError) as exc:
            raise RetryableFetchError(url, f"{type(exc).__name__}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise FatalFetchError(url, f"{type(exc).__name__}: {exc}") from exc

        status = classify_status(response.status_code)
        if status is StatusClass.OK:
            return response.content
        error_cls: type[FetchError] = (
            RetryableFetchError if status is StatusClass.RETRYABLE else FatalFetchError
        )
        raise error_cls(
            url, f"Non-OK status code {response.status_code}", status_code=response.status_code
        )


__all__ = ["RecordFetcher", "StatusClass", "classify_status"]
