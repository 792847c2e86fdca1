"""In-process tables for tests and dry runs."""
from __future__ import annotations

import uuid
from dataclasses import replace

from cvjob.log import get_logger
from cvjob.models import (
    CoverLetter,
    JobFormData,
    JobPosting,
    UserProfile,
    normalize_deadline,
    utc_now,
)
from cvjob.stores.base import JobStore, LetterStore, ProfileStore

log = get_logger(__name__)


class MemoryJobStore(JobStore):
    def __init__(self) -> None:
        self.rows: dict[str, JobPosting] = {}

    async def fetch(self, job_id: str) -> JobPosting | None:
        return self.rows.get(job_id)

    async def create(self, data: JobFormData, user_id: str) -> JobPosting:
        job = JobPosting(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=data.title,
            company=data.company,
            description=data.description,
            contact_person=data.contact_person,
            url=data.url,
            deadline=normalize_deadline(data.deadline),
        )
        self.rows[job.id] = job
        log.debug("Created job %s", job.id)
        return job

    async def update(self, job_id: str, data: JobFormData) -> JobPosting:
        existing = self.rows.get(job_id)
        if existing is None:
            raise LookupError(f"Job {job_id} not found")
        job = JobPosting(
            id=job_id,
            user_id=existing.user_id,
            title=data.title,
            company=data.company,
            description=data.description,
            contact_person=data.contact_person,
            url=data.url,
            deadline=normalize_deadline(data.deadline),
            created_at=existing.created_at,
            updated_at=utc_now(),
        )
        self.rows[job_id] = job
        return job

    async def list_for_user(self, user_id: str) -> list[JobPosting]:
        return [j for j in self.rows.values() if j.user_id == user_id]


class MemoryLetterStore(LetterStore):
    def __init__(self) -> None:
        self.rows: dict[str, CoverLetter] = {}

    async def fetch(self, letter_id: str) -> CoverLetter | None:
        return self.rows.get(letter_id)

    async def insert(self, user_id: str, job_posting_id: str, content: str) -> CoverLetter:
        letter = CoverLetter(
            id=uuid.uuid4().hex,
            user_id=user_id,
            job_posting_id=job_posting_id,
            content=content,
        )
        self.rows[letter.id] = letter
        return replace(letter)

    async def update(self, letter_id: str, content: str, updated_at: str) -> None:
        letter = self.rows.get(letter_id)
        if letter is None:
            raise LookupError(f"Letter {letter_id} not found")
        self.rows[letter_id] = replace(letter, content=content, updated_at=updated_at)

    async def list_for_job(self, job_posting_id: str) -> list[CoverLetter]:
        return [row for row in self.rows.values() if row.job_posting_id == job_posting_id]


class MemoryProfileStore(ProfileStore):
    def __init__(self, profiles: dict[str, UserProfile] | None = None) -> None:
        self.profiles = dict(profiles or {})

    async def fetch_profile(self, user_id: str) -> UserProfile:
        return self.profiles.get(user_id) or UserProfile()
