from __future__ import annotations

import asyncio

import pytest
import requests

from cvjob.errors import (
    AppError,
    ErrorKind,
    ErrorPhase,
    GenerationTimeoutError,
    classify_error,
    classify_kind,
    is_retryable,
    validation_error,
)
from cvjob.notify import error_toast


@pytest.mark.parametrize(
    "exc, kind",
    [
        (GenerationTimeoutError("budget"), ErrorKind.TIMEOUT),
        (asyncio.TimeoutError(), ErrorKind.TIMEOUT),
        (requests.Timeout("read"), ErrorKind.TIMEOUT),
        (RuntimeError("Request timed out"), ErrorKind.TIMEOUT),
        (requests.ConnectionError("refused"), ErrorKind.NETWORK),
        (RuntimeError("Failed to fetch: network error"), ErrorKind.NETWORK),
        (PermissionError("nope"), ErrorKind.AUTH),
        (RuntimeError("JWT expired: 401"), ErrorKind.AUTH),
        (RuntimeError("something broke"), ErrorKind.SERVER),
    ],
)
def test_classify_kind(exc, kind):
    assert classify_kind(exc) is kind


def test_http_status_auth():
    response = requests.Response()
    response.status_code = 403
    exc = requests.HTTPError("Client Error", response=response)

    assert classify_kind(exc) is ErrorKind.AUTH
    assert is_retryable(exc) is False


def test_retryable_kinds():
    assert is_retryable(ConnectionError("x"))
    assert is_retryable(TimeoutError("x"))
    assert not is_retryable(validation_error({"title": "Jobtitel er påkrævet"}))
    assert not is_retryable(RuntimeError("boom"))
    assert is_retryable(RuntimeError("boom"), retry_server_errors=True)


def test_classify_error_wraps_with_cause():
    raw = ConnectionError("Network down")

    error = classify_error(raw, ErrorPhase.GENERATION, attempts=2)

    assert error.kind is ErrorKind.NETWORK
    assert error.phase is ErrorPhase.GENERATION
    assert error.attempts == 2
    assert error.retryable is True
    assert error.__cause__ is raw
    assert error.details["type"] == "ConnectionError"


def test_classify_error_keeps_existing_classification():
    original = AppError("boom", ErrorKind.TIMEOUT, attempts=4)

    error = classify_error(original, ErrorPhase.GENERATION)

    assert error is original
    assert error.kind is ErrorKind.TIMEOUT
    assert error.phase is ErrorPhase.GENERATION
    assert error.attempts == 4


def test_classify_error_does_not_overwrite_phase():
    original = AppError("boom", phase=ErrorPhase.JOB_SAVE)

    assert classify_error(original, ErrorPhase.GENERATION).phase is ErrorPhase.JOB_SAVE


def test_validation_error_fields():
    error = validation_error({"company": "Virksomhedsnavn er påkrævet"})

    assert error.kind is ErrorKind.VALIDATION
    assert error.retryable is False
    assert error.details["fields"] == {"company": "Virksomhedsnavn er påkrævet"}


def test_status_digits_inside_ids_are_not_auth():
    error = classify_error(LookupError("Letter 9f4013ab not found"), ErrorPhase.LETTER_SAVE)

    assert error.kind is ErrorKind.SERVER
    toast = error_toast(error)
    assert toast.title == "Fejl ved gemning"
    assert toast.action_label == "Gem ansøgning"


def test_standalone_status_in_message_is_auth():
    assert classify_kind(RuntimeError("HTTP 403 Forbidden")) is ErrorKind.AUTH
    assert classify_kind(RuntimeError("row 14030 missing")) is ErrorKind.SERVER
