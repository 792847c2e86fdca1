"""Job postings and cover letters in local CSV tables with file locking."""
from __future__ import annotations

import asyncio
import csv
import fcntl
import uuid
from pathlib import Path
from typing import Any, Callable

from cvjob.config import DATA_DIR
from cvjob.log import get_logger, truncate_for_log
from cvjob.models import (
    CoverLetter,
    JobFormData,
    JobPosting,
    normalize_deadline,
    utc_now,
)
from cvjob.stores.base import JobStore, LetterStore

log = get_logger(__name__)

JOB_HEADERS: list[str] = [
    "id", "user_id", "title", "company", "description",
    "contact_person", "url", "deadline", "created_at", "updated_at",
]
LETTER_HEADERS: list[str] = [
    "id", "user_id", "job_posting_id", "content", "created_at", "updated_at",
]


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class CsvTable:
    """A header-first CSV file; updates rewrite the whole file under an exclusive lock."""

    def __init__(self, path: Path, headers: list[str]) -> None:
        self.path = path
        self.headers = headers

    def ensure(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            with open(self.path, "w", newline="", encoding="utf-8") as f:
                _lock(f)
                csv.writer(f).writerow(self.headers)
                _unlock(f)
            log.info("Created table → %s", self.path.name)

    def rows(self) -> list[dict[str, str]]:
        self.ensure()
        with open(self.path, "r", newline="", encoding="utf-8") as f:
            _lock(f, exclusive=False)
            rows = list(csv.DictReader(f))
            _unlock(f)
        return rows

    def find(self, row_id: str) -> dict[str, str] | None:
        for r in self.rows():
            if r.get("id") == row_id:
                return r
        return None

    def append(self, row: dict[str, Any]) -> None:
        self.ensure()
        clean = {k: "" if row.get(k) is None else row.get(k) for k in self.headers}
        with open(self.path, "a", newline="", encoding="utf-8") as f:
            _lock(f)
            csv.DictWriter(f, fieldnames=self.headers).writerow(clean)
            _unlock(f)

    def update(self, row_id: str, changes: Callable[[dict[str, str]], None]) -> dict[str, str] | None:
        self.ensure()
        with open(self.path, "r+", newline="", encoding="utf-8") as f:
            _lock(f)
            rows = list(csv.DictReader(f))
            found = None
            for r in rows:
                if r.get("id") == row_id:
                    changes(r)
                    found = r
                    break
            if found is not None:
                f.seek(0)
                f.truncate()
                w = csv.DictWriter(f, fieldnames=self.headers)
                w.writeheader()
                w.writerows(rows)
            _unlock(f)
        return found


class CsvJobStore(JobStore):
    def __init__(self, data_dir: Path | None = None) -> None:
        self.table = CsvTable((data_dir or DATA_DIR) / "job_postings.csv", JOB_HEADERS)

    async def fetch(self, job_id: str) -> JobPosting | None:
        row = await asyncio.to_thread(self.table.find, job_id)
        return JobPosting.from_row(row) if row else None

    async def create(self, data: JobFormData, user_id: str) -> JobPosting:
        job = JobPosting(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=data.title or "",
            company=data.company or "",
            description=data.description or "",
            contact_person=data.contact_person,
            url=data.url,
            deadline=normalize_deadline(data.deadline),
        )
        await asyncio.to_thread(self.table.append, job.to_row())
        log.debug("Created job %s: %s @ %s", job.id, job.title, job.company)
        return job

    async def update(self, job_id: str, data: JobFormData) -> JobPosting:
        def apply(r: dict[str, str]) -> None:
            r.update(
                title=data.title,
                company=data.company,
                description=data.description,
                contact_person=data.contact_person or "",
                url=data.url or "",
                deadline=normalize_deadline(data.deadline) or "",
                updated_at=utc_now(),
            )

        row = await asyncio.to_thread(self.table.update, job_id, apply)
        if row is None:
            raise LookupError(f"Fejl ved opdatering af job: {job_id} findes ikke")
        log.debug("Updated job %s (%s)", job_id, truncate_for_log(data.description))
        return JobPosting.from_row(row)

    async def list_for_user(self, user_id: str) -> list[JobPosting]:
        rows = await asyncio.to_thread(self.table.rows)
        return [JobPosting.from_row(r) for r in rows if r.get("user_id") == user_id]


class CsvLetterStore(LetterStore):
    def __init__(self, data_dir: Path | None = None) -> None:
        self.table = CsvTable((data_dir or DATA_DIR) / "cover_letters.csv", LETTER_HEADERS)

    async def fetch(self, letter_id: str) -> CoverLetter | None:
        row = await asyncio.to_thread(self.table.find, letter_id)
        return CoverLetter.from_row(row) if row else None

    async def insert(self, user_id: str, job_posting_id: str, content: str) -> CoverLetter:
        letter = CoverLetter(
            id=uuid.uuid4().hex,
            user_id=user_id,
            job_posting_id=job_posting_id,
            content=content,
        )
        await asyncio.to_thread(self.table.append, letter.to_row())
        log.debug("Saved letter %s for job %s", letter.id, job_posting_id)
        return letter

    async def update(self, letter_id: str, content: str, updated_at: str) -> None:
        def apply(r: dict[str, str]) -> None:
            r["content"] = content
            r["updated_at"] = updated_at

        row = await asyncio.to_thread(self.table.update, letter_id, apply)
        if row is None:
            raise LookupError(f"Letter {letter_id} not found")

    async def list_for_job(self, job_posting_id: str) -> list[CoverLetter]:
        rows = await asyncio.to_thread(self.table.rows)
        return [CoverLetter.from_row(r) for r in rows if r.get("job_posting_id") == job_posting_id]
