"""Thread primitives for running one worker per batch and waiting for all of them."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from threading import Condition
from typing import Callable, TypeVar

T = TypeVar("T")


class CompletionLatch:
    """Countdown latch: ``wait`` returns once ``count_down`` was called ``count`` times."""

    def __init__(self, count: int) -> None:
        if count < 0:
            raise ValueError("count must be >= 0")
        self._count = count
        self._condition = Condition()

    @property
    def remaining(self) -> int:
        with self._condition:
            return self._count

    def count_down(self) -> None:
        with self._condition:
            if self._count == 0:
                return
            self._count -= 1
            if self._count == 0:
                self._condition.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        with self._condition:
            return self._condition.wait_for(lambda: self._count == 0, timeout=timeout)


class BatchThreadPool:
    """Dedicated executor sized so every batch starts immediately."""

    def __init__(self, batch_count: int, thread_name_prefix: str = "gatherer-batch") -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max(batch_count, 1), thread_name_prefix=thread_name_prefix
        )

    def submit(self, task: Callable[[], T]) -> Future[T]:
        return self._executor.submit(task)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "BatchThreadPool":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.shutdown()


__all__ = ["BatchThreadPool", "CompletionLatch"]
