"""Error taxonomy for the generation workflow.

Every failure that reaches the user is turned into an ``AppError`` with a
``kind`` (what went wrong), an optional ``phase`` (where it went wrong), a
``retryable`` flag and an ``attempts`` count. ``classify_error`` is the one
place raw exceptions from requests, openai, asyncio and the stores are
mapped onto that taxonomy.
"""
from __future__ import annotations

import asyncio
import re
from enum import Enum
from typing import Any

import openai
import requests


class ErrorKind(str, Enum):
    NETWORK = "network"
    TIMEOUT = "timeout"
    VALIDATION = "validation"
    AUTH = "auth"
    SERVER = "server"


class ErrorPhase(str, Enum):
    USER_FETCH = "user-fetch"
    JOB_SAVE = "job-save"
    JOB_FETCH = "job-fetch"
    GENERATION = "generation"
    LETTER_SAVE = "letter-save"
    LETTER_FETCH = "letter-fetch"
    CV_PARSING = "cv-parsing"


class AppError(Exception):
    """Classified failure surfaced to callers of the workflow."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.SERVER,
        *,
        phase: ErrorPhase | None = None,
        retryable: bool = False,
        attempts: int = 1,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.phase = phase
        self.retryable = retryable
        self.attempts = attempts
        self.details = details or {}
        self.user_message = user_message or message

    def __repr__(self) -> str:
        phase = self.phase.value if self.phase else None
        return (
            f"AppError({self.message!r}, kind={self.kind.value}, phase={phase}, "
            f"retryable={self.retryable}, attempts={self.attempts})"
        )


class GenerationTimeoutError(TimeoutError):
    """The generation budget elapsed before the AI call resolved."""


class GenerationCancelled(Exception):
    """The in-flight generation was aborted by the user or by teardown."""

    def __init__(self, reason: str = "cancelled") -> None:
        super().__init__(f"Generation aborted ({reason})")
        self.reason = reason


_NETWORK_WORDS = ("network", "connection", "forbindelse", "netværk", "offline")
_TIMEOUT_WORDS = ("timeout", "timed out")
_AUTH_STATUS = re.compile(r"\b40[13]\b")
_AUTH_WORDS = ("unauthorized", "uautoriseret", "forbidden", "not authenticated")


def _message(exc: BaseException) -> str:
    return str(exc).lower()


def _status_code(exc: BaseException) -> int | None:
    if isinstance(exc, openai.APIStatusError):
        return exc.status_code
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return exc.response.status_code
    return getattr(exc, "status_code", None)


def is_timeout_error(exc: BaseException) -> bool:
    if isinstance(exc, AppError):
        return exc.kind is ErrorKind.TIMEOUT
    # APITimeoutError subclasses APIConnectionError; check it before network.
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, requests.Timeout, openai.APITimeoutError)):
        return True
    msg = _message(exc)
    return any(w in msg for w in _TIMEOUT_WORDS)


def is_network_error(exc: BaseException) -> bool:
    if isinstance(exc, AppError):
        return exc.kind is ErrorKind.NETWORK
    if isinstance(exc, (ConnectionError, requests.ConnectionError, openai.APIConnectionError)):
        return True
    msg = _message(exc)
    return any(w in msg for w in _NETWORK_WORDS)


def is_auth_error(exc: BaseException) -> bool:
    if isinstance(exc, AppError):
        return exc.kind is ErrorKind.AUTH
    if isinstance(exc, (PermissionError, openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    if _status_code(exc) in (401, 403):
        return True
    msg = _message(exc)
    return bool(_AUTH_STATUS.search(msg)) or any(w in msg for w in _AUTH_WORDS)


def classify_kind(exc: BaseException) -> ErrorKind:
    if isinstance(exc, AppError):
        return exc.kind
    if is_timeout_error(exc):
        return ErrorKind.TIMEOUT
    if is_network_error(exc):
        return ErrorKind.NETWORK
    if is_auth_error(exc):
        return ErrorKind.AUTH
    return ErrorKind.SERVER


def is_retryable(exc: BaseException, *, retry_server_errors: bool = False) -> bool:
    """Default retry predicate: network and timeout yes, validation and auth never."""
    kind = classify_kind(exc)
    if kind in (ErrorKind.NETWORK, ErrorKind.TIMEOUT):
        return True
    if kind is ErrorKind.SERVER:
        return retry_server_errors
    return False


def classify_error(
    exc: BaseException,
    phase: ErrorPhase | None = None,
    *,
    attempts: int = 1,
    retryable: bool | None = None,
) -> AppError:
    """Wrap ``exc`` into an AppError, keeping an existing classification."""
    if isinstance(exc, AppError):
        if exc.phase is None:
            exc.phase = phase
        if retryable is not None:
            exc.retryable = retryable
        exc.attempts = max(exc.attempts, attempts)
        return exc

    kind = classify_kind(exc)
    if retryable is None:
        retryable = kind in (ErrorKind.NETWORK, ErrorKind.TIMEOUT)
    error = AppError(
        str(exc) or exc.__class__.__name__,
        kind,
        phase=phase,
        retryable=retryable,
        attempts=attempts,
        details={"type": exc.__class__.__name__},
    )
    error.__cause__ = exc
    return error


def validation_error(fields: dict[str, str], message: str = "Ugyldige jobdata") -> AppError:
    return AppError(
        message,
        ErrorKind.VALIDATION,
        retryable=False,
        details={"fields": fields},
    )
