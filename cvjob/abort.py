"""Abort controller shared by the generation timeout and teardown."""
from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from cvjob.errors import GenerationCancelled, GenerationTimeoutError
from cvjob.log import get_logger

log = get_logger(__name__)

T = TypeVar("T")

TIMEOUT = "timeout"
CANCELLED = "cancelled"
UNMOUNTED = "unmounted"


class AbortController:
    """One-shot abort signal with an owned timeout handle."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None
        self._timer: asyncio.TimerHandle | None = None
        self.timeout: float | None = None

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    def abort(self, reason: str = CANCELLED) -> None:
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()
        self.clear_timeout()
        log.debug("Generation aborted (%s)", reason)

    def set_timeout(self, seconds: float) -> None:
        self.clear_timeout()
        self.timeout = seconds
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(seconds, self.abort, TIMEOUT)

    def clear_timeout(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def error(self) -> Exception:
        if self.reason == TIMEOUT:
            return GenerationTimeoutError(
                f"Generation timeout — took longer than {self.timeout}s"
            )
        return GenerationCancelled(self.reason or CANCELLED)

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the controller aborts first."""
        if self.aborted:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise self.error()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            waiter.cancel()
            raise

        if task in done:
            waiter.cancel()
            return task.result()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise self.error()
