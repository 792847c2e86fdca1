"""Phase tracker for the generation workflow."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from cvjob.log import get_logger

log = get_logger(__name__)


class Phase(str, Enum):
    JOB_SAVE = "job-save"
    USER_FETCH = "user-fetch"
    GENERATION = "generation"
    LETTER_SAVE = "letter-save"
    JOB_FETCH = "job-fetch"
    LETTER_FETCH = "letter-fetch"
    COMPLETE = "complete"


class LoadingState(str, Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    GENERATING = "generating"
    SAVING = "saving"


@dataclass(frozen=True)
class GenerationProgress:
    phase: Phase
    progress: int
    message: str


BASELINE = GenerationProgress(Phase.JOB_SAVE, 0, "")

ProgressListener = Callable[[GenerationProgress], None]


class PhaseTracker:
    """Holds the current (phase, progress, message) triple.

    Progress outside 0..100 is a caller bug: logged and clamped by default,
    rejected with ValueError when ``strict``.
    """

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict
        self._current = BASELINE
        self._listeners: list[ProgressListener] = []

    @property
    def current(self) -> GenerationProgress:
        return self._current

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update_phase(self, phase: Phase, progress: int, message: str) -> GenerationProgress:
        if not isinstance(phase, Phase):
            phase = Phase(phase)
        if not 0 <= progress <= 100:
            if self.strict:
                raise ValueError(f"progress out of range: {progress}")
            log.warning("Progress %s out of range for %s — clamping", progress, phase.value)
            progress = max(0, min(100, progress))
        self._set(GenerationProgress(phase, int(progress), message))
        return self._current

    def reset(self) -> GenerationProgress:
        self._set(BASELINE)
        return self._current

    def _set(self, value: GenerationProgress) -> None:
        self._current = value
        for listener in list(self._listeners):
            listener(value)
