"""Toast reporter: turns workflow outcomes into transient user notifications."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from cvjob.errors import AppError, ErrorKind
from cvjob.log import get_logger
from cvjob.messages import (
    DEFAULT_ERROR_DESCRIPTION,
    DEFAULT_RETRY_LABEL,
    KIND_TITLES,
    PHASE_HELP,
    TOAST_MESSAGES,
)

log = get_logger(__name__)


@dataclass(frozen=True)
class Toast:
    title: str
    description: str
    variant: str = "default"
    action_label: str | None = None


ToastSink = Callable[[Toast], None]


class ToastReporter:
    """Fire-and-forget notifications; sinks are the UI side of the seam."""

    def __init__(self, sinks: list[ToastSink] | None = None) -> None:
        self._sinks: list[ToastSink] = list(sinks or [])

    def add_sink(self, sink: ToastSink) -> None:
        self._sinks.append(sink)

    def show(self, toast: Toast) -> None:
        level = "warning" if toast.variant == "destructive" else "info"
        getattr(log, level)("[toast] %s — %s", toast.title, toast.description)
        for sink in self._sinks:
            try:
                sink(toast)
            except Exception as exc:
                log.error("Toast sink %r failed: %s", sink, exc)

    def message(self, key: str) -> Toast:
        title, description, variant = TOAST_MESSAGES[key]
        toast = Toast(title, description, variant)
        self.show(toast)
        return toast

    def report_error(self, error: AppError) -> Toast:
        toast = error_toast(error)
        self.show(toast)
        return toast


def error_toast(error: AppError) -> Toast:
    """Pick title, help text and retry label for a classified error."""
    if error.kind is ErrorKind.VALIDATION:
        title, description, _ = TOAST_MESSAGES["missingFields"]
        fields = error.details.get("fields") or {}
        if fields:
            description = " ".join(fields.values())
        return Toast(title, description, "destructive", None)

    if error.kind is ErrorKind.AUTH:
        _, description, _ = TOAST_MESSAGES["loginRequired"]
        return Toast(KIND_TITLES[ErrorKind.AUTH], description, "destructive", "Log ind")

    if error.phase is not None:
        title, description, label = PHASE_HELP[error.phase]
        if error.kind is ErrorKind.TIMEOUT:
            title = TOAST_MESSAGES["generationTimeout"][0]
        return Toast(title, description, "destructive", label)

    if error.kind is ErrorKind.TIMEOUT:
        title, description, _ = TOAST_MESSAGES["generationTimeout"]
        return Toast(title, description, "destructive", DEFAULT_RETRY_LABEL)

    if error.kind is ErrorKind.NETWORK:
        title, description, _ = TOAST_MESSAGES["networkError"]
        return Toast(title, description, "destructive", DEFAULT_RETRY_LABEL)

    return Toast(
        KIND_TITLES[error.kind],
        error.user_message or DEFAULT_ERROR_DESCRIPTION,
        "destructive",
        DEFAULT_RETRY_LABEL,
    )
