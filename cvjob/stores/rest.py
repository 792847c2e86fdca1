"""Remote tables over a PostgREST-style HTTP API (e.g. a hosted Postgres backend).

Docs: https://postgrest.org/en/stable/references/api/tables_views.html
"""
from __future__ import annotations

import asyncio
from typing import Any

import requests

from cvjob.errors import AppError, ErrorKind, is_retryable
from cvjob.log import get_logger
from cvjob.models import (
    CoverLetter,
    JobFormData,
    JobPosting,
    UserProfile,
    normalize_deadline,
    utc_now,
)
from cvjob.retry import retry
from cvjob.stores.base import JobStore, LetterStore, ProfileStore

log = get_logger(__name__)

_TIMEOUT = 15


def _request_not_sent(exc: BaseException) -> bool:
    """True only when the connection failed before the request reached the server."""
    return isinstance(exc, requests.ConnectionError) and not isinstance(exc, requests.ReadTimeout)


class RestTable:
    """One PostgREST table.

    Reads and PATCH updates are retried under the configured policy; an
    insert is repeated only when the connection was never established.
    """

    def __init__(
        self,
        base_url: str,
        table: str,
        api_key: str,
        access_token: str = "",
        session: requests.Session | None = None,
        *,
        max_retries: int = 2,
        initial_delay: float = 1.0,
        retry_server_errors: bool = False,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self.table = table
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {access_token or api_key}",
            "Content-Type": "application/json",
        }
        policy = retry(
            max_attempts=max_retries + 1,
            base_delay=initial_delay,
            should_retry=lambda exc: is_retryable(exc, retry_server_errors=retry_server_errors),
        )
        self.select = policy(self._select)
        self.update = policy(self._update)
        self.insert = retry(
            max_attempts=max_retries + 1,
            base_delay=initial_delay,
            should_retry=_request_not_sent,
        )(self._insert)

    def _select(self, **filters: str) -> list[dict[str, Any]]:
        params = {"select": "*"}
        params.update({k: f"eq.{v}" for k, v in filters.items()})
        r = self.session.get(self.url, params=params, headers=self.headers, timeout=_TIMEOUT)
        r.raise_for_status()
        return r.json()

    def select_one(self, row_id: str) -> dict[str, Any] | None:
        rows = self.select(id=row_id)
        return rows[0] if rows else None

    def _insert(self, row: dict[str, Any]) -> dict[str, Any]:
        r = self.session.post(
            self.url,
            json=row,
            headers={**self.headers, "Prefer": "return=representation"},
            timeout=_TIMEOUT,
        )
        r.raise_for_status()
        rows = r.json()
        if not rows:
            raise AppError(f"Intet id returneret fra serveren ({self.table})", ErrorKind.SERVER)
        return rows[0]

    def _update(self, row_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        r = self.session.patch(
            self.url,
            params={"id": f"eq.{row_id}"},
            json=changes,
            headers={**self.headers, "Prefer": "return=representation"},
            timeout=_TIMEOUT,
        )
        r.raise_for_status()
        rows = r.json()
        return rows[0] if rows else None


class RestJobStore(JobStore):
    def __init__(self, table: RestTable) -> None:
        self.table = table

    async def fetch(self, job_id: str) -> JobPosting | None:
        row = await asyncio.to_thread(self.table.select_one, job_id)
        return JobPosting.from_row(row) if row else None

    async def create(self, data: JobFormData, user_id: str) -> JobPosting:
        row = {
            "user_id": user_id,
            "title": data.title or "",
            "company": data.company or "",
            "description": data.description or "",
            "contact_person": data.contact_person,
            "url": data.url,
            "deadline": normalize_deadline(data.deadline),
        }
        created = await asyncio.to_thread(self.table.insert, row)
        log.debug("Created remote job %s", created.get("id"))
        return JobPosting.from_row(created)

    async def update(self, job_id: str, data: JobFormData) -> JobPosting:
        changes = {
            "title": data.title,
            "company": data.company,
            "description": data.description,
            "contact_person": data.contact_person,
            "url": data.url,
            "deadline": normalize_deadline(data.deadline),
            "updated_at": utc_now(),
        }
        row = await asyncio.to_thread(self.table.update, job_id, changes)
        if row is None:
            raise LookupError(f"Fejl ved opdatering af job: {job_id} findes ikke")
        return JobPosting.from_row(row)

    async def list_for_user(self, user_id: str) -> list[JobPosting]:
        rows = await asyncio.to_thread(self.table.select, user_id=user_id)
        return [JobPosting.from_row(r) for r in rows]


class RestLetterStore(LetterStore):
    def __init__(self, table: RestTable) -> None:
        self.table = table

    async def fetch(self, letter_id: str) -> CoverLetter | None:
        row = await asyncio.to_thread(self.table.select_one, letter_id)
        return CoverLetter.from_row(row) if row else None

    async def insert(self, user_id: str, job_posting_id: str, content: str) -> CoverLetter:
        row = {"user_id": user_id, "job_posting_id": job_posting_id, "content": content}
        created = await asyncio.to_thread(self.table.insert, row)
        return CoverLetter.from_row(created)

    async def update(self, letter_id: str, content: str, updated_at: str) -> None:
        row = await asyncio.to_thread(
            self.table.update, letter_id, {"content": content, "updated_at": updated_at}
        )
        if row is None:
            raise LookupError(f"Letter {letter_id} not found")

    async def list_for_job(self, job_posting_id: str) -> list[CoverLetter]:
        rows = await asyncio.to_thread(self.table.select, job_posting_id=job_posting_id)
        return [CoverLetter.from_row(r) for r in rows]


class RestProfileStore(ProfileStore):
    def __init__(self, table: RestTable) -> None:
        self.table = table

    async def fetch_profile(self, user_id: str) -> UserProfile:
        row = await asyncio.to_thread(self.table.select_one, user_id)
        if not row:
            log.debug("No remote profile for user %s", user_id)
            return UserProfile()
        return UserProfile.from_row(row)
