from __future__ import annotations

from abc import ABC, abstractmethod

from cvjob.models import CoverLetter, JobFormData, JobPosting, UserProfile


class JobStore(ABC):
    @abstractmethod
    async def fetch(self, job_id: str) -> JobPosting | None:
        pass

    @abstractmethod
    async def create(self, data: JobFormData, user_id: str) -> JobPosting:
        pass

    @abstractmethod
    async def update(self, job_id: str, data: JobFormData) -> JobPosting:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[JobPosting]:
        pass

    async def save(self, data: JobFormData, user_id: str, existing_id: str | None = None) -> JobPosting:
        """Create, or update ``existing_id`` in place (last writer wins)."""
        if existing_id:
            return await self.update(existing_id, data)
        return await self.create(data, user_id)


class LetterStore(ABC):
    @abstractmethod
    async def fetch(self, letter_id: str) -> CoverLetter | None:
        pass

    @abstractmethod
    async def insert(self, user_id: str, job_posting_id: str, content: str) -> CoverLetter:
        pass

    @abstractmethod
    async def update(self, letter_id: str, content: str, updated_at: str) -> None:
        pass

    @abstractmethod
    async def list_for_job(self, job_posting_id: str) -> list[CoverLetter]:
        pass


class ProfileStore(ABC):
    @abstractmethod
    async def fetch_profile(self, user_id: str) -> UserProfile:
        pass
