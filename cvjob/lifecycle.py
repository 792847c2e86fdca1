"""Mount guard: gates state mutation on the owning UI context being alive."""
from __future__ import annotations

from typing import Callable, TypeVar

from cvjob.log import get_logger

log = get_logger(__name__)

T = TypeVar("T")


class MountGuard:
    """Live flag with an irreversible ``stop()``.

    ``safe_set_state`` applies a mutation only while live; after teardown
    it is a silent no-op because the context it targeted is gone.
    """

    def __init__(self) -> None:
        self._live = False
        self._stopped = False
        self._teardown: list[Callable[[], None]] = []

    def start(self) -> None:
        if self._stopped:
            log.debug("start() after stop() ignored")
            return
        self._live = True

    def stop(self) -> None:
        if self._stopped:
            return
        self._live = False
        self._stopped = True
        callbacks, self._teardown = self._teardown, []
        for cb in callbacks:
            try:
                cb()
            except Exception as exc:
                log.error("Teardown callback failed: %s", exc)

    def is_live(self) -> bool:
        return self._live

    @property
    def stopped(self) -> bool:
        return self._stopped

    def on_stop(self, callback: Callable[[], None]) -> None:
        """Register a callback run once on teardown (e.g. abort in-flight work)."""
        if self._stopped:
            callback()
            return
        self._teardown.append(callback)

    def safe_set_state(self, setter: Callable[[T], None], value: T) -> bool:
        if not self._live:
            return False
        setter(value)
        return True
