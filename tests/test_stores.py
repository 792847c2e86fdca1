from __future__ import annotations

import pytest
import requests

from cvjob.config import Settings
from cvjob.errors import AppError
from cvjob.stores import (
    CsvJobStore,
    MemoryJobStore,
    RestJobStore,
    RestLetterStore,
    RestTable,
    get_stores,
)


class FakeResponse:
    def __init__(self, body) -> None:
        self.body = body

    def raise_for_status(self) -> None:
        pass

    def json(self):
        return self.body


class FakeSession:
    def __init__(self, body) -> None:
        self.body = body
        self.requests = []

    def _record(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        return FakeResponse(self.body)

    def get(self, url, **kwargs):
        return self._record("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._record("POST", url, **kwargs)

    def patch(self, url, **kwargs):
        return self._record("PATCH", url, **kwargs)


def test_get_stores_backends():
    assert isinstance(get_stores(Settings(store_backend="memory"), lambda k: "").jobs, MemoryJobStore)
    assert isinstance(get_stores(Settings(store_backend="csv"), lambda k: "").jobs, CsvJobStore)

    env = {"CVJOB_REST_URL": "https://db.example.com", "CVJOB_API_KEY": "anon"}
    assert isinstance(get_stores(Settings(store_backend="rest"), lambda k: env.get(k, "")).jobs, RestJobStore)


def test_rest_without_credentials_falls_back_to_csv():
    assert isinstance(get_stores(Settings(store_backend="rest"), lambda k: "").jobs, CsvJobStore)


def test_rest_select_filters():
    session = FakeSession([{"id": "1"}])
    table = RestTable("https://db.example.com/", "job_postings", "anon", "token", session=session)

    assert table.select_one("1") == {"id": "1"}
    method, url, kwargs = session.requests[0]
    assert url == "https://db.example.com/rest/v1/job_postings"
    assert kwargs["params"] == {"select": "*", "id": "eq.1"}
    assert kwargs["headers"]["Authorization"] == "Bearer token"


def test_rest_insert_without_rows_is_an_error():
    table = RestTable("https://db.example.com", "cover_letters", "anon", session=FakeSession([]))

    with pytest.raises(AppError):
        table.insert({"content": "Hej"})


@pytest.mark.asyncio
async def test_rest_letter_update_missing_raises():
    store = RestLetterStore(RestTable("https://db.example.com", "cover_letters", "anon", session=FakeSession([])))

    with pytest.raises(LookupError):
        await store.update("missing", "x", "2026-01-01")


class ScriptedSession:
    """Each call consumes the next outcome: an exception is raised, anything else is the body."""

    def __init__(self, outcomes) -> None:
        self.outcomes = list(outcomes)
        self.calls = []

    def _next(self, method, url, **kwargs):
        self.calls.append(method)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return FakeResponse(outcome)

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)

    def patch(self, url, **kwargs):
        return self._next("PATCH", url, **kwargs)


def server_error(status: int = 500) -> requests.HTTPError:
    response = requests.Response()
    response.status_code = status
    return requests.HTTPError(f"{status} Server Error", response=response)


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr("cvjob.retry.time.sleep", lambda s: None)


def test_insert_is_not_resent_after_read_timeout(no_sleep):
    session = ScriptedSession([requests.ReadTimeout("read timed out"), [{"id": "1"}]])
    table = RestTable("https://db.example.com", "cover_letters", "anon", session=session)

    with pytest.raises(requests.Timeout):
        table.insert({"content": "Hej"})
    assert session.calls == ["POST"]


def test_insert_retries_when_connection_was_refused(no_sleep):
    session = ScriptedSession([requests.ConnectionError("connection refused"), [{"id": "1"}]])
    table = RestTable("https://db.example.com", "cover_letters", "anon", session=session)

    assert table.insert({"content": "Hej"}) == {"id": "1"}
    assert session.calls == ["POST", "POST"]


def test_select_retries_read_timeouts(no_sleep):
    session = ScriptedSession([requests.ReadTimeout("read timed out"), [{"id": "1"}]])
    table = RestTable("https://db.example.com", "job_postings", "anon", session=session)

    assert table.select_one("1") == {"id": "1"}
    assert session.calls == ["GET", "GET"]


@pytest.mark.parametrize("retry_server_errors, expected_calls", [(False, 1), (True, 3)])
def test_server_error_policy_comes_from_settings(no_sleep, retry_server_errors, expected_calls):
    settings = Settings(
        store_backend="rest", retry_max_retries=2, retry_server_errors=retry_server_errors
    )
    env = {"CVJOB_REST_URL": "https://db.example.com", "CVJOB_API_KEY": "anon"}
    table = get_stores(settings, lambda k: env.get(k, "")).jobs.table
    table.session = ScriptedSession([server_error()] * 3)

    with pytest.raises(requests.HTTPError):
        table.select_one("1")
    assert len(table.session.calls) == expected_calls
