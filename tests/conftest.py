from __future__ import annotations

import asyncio
from typing import Any

import pytest

from cvjob.config import Settings
from cvjob.generators.base import LetterGenerator
from cvjob.invoker import GenerationInvoker
from cvjob.models import JobFormData, User, UserProfile
from cvjob.notify import Toast, ToastReporter
from cvjob.orchestrator import GenerationOrchestrator
from cvjob.stores.memory import MemoryJobStore, MemoryLetterStore, MemoryProfileStore

DESCRIPTION = (
    "Vi søger en erfaren udvikler til vores produktteam. Du skal bygge nye "
    "funktioner og samarbejde tæt med design og produkt."
)
LETTER = "Kære Maria Hansen,\n\nJeg søger hermed stillingen som Udvikler hos Acme."


class FakeGenerator(LetterGenerator):
    """Returns ``content`` or raises ``error``; optionally blocks on ``gate``."""

    def __init__(self, content: str = LETTER, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()
        self.calls: list[dict[str, Any]] = []

    async def generate(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(payload)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return {"content": self.content}


class CountingJobStore(MemoryJobStore):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []
        self.fail_with: Exception | None = None

    async def create(self, data, user_id):
        self.calls.append("create")
        if self.fail_with is not None:
            raise self.fail_with
        return await super().create(data, user_id)

    async def update(self, job_id, data):
        self.calls.append("update")
        if self.fail_with is not None:
            raise self.fail_with
        return await super().update(job_id, data)


class CountingLetterStore(MemoryLetterStore):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []
        self.fail_update_with: Exception | None = None

    async def insert(self, user_id, job_posting_id, content):
        self.calls.append("insert")
        return await super().insert(user_id, job_posting_id, content)

    async def update(self, letter_id, content, updated_at):
        self.calls.append("update")
        if self.fail_update_with is not None:
            raise self.fail_update_with
        await super().update(letter_id, content, updated_at)


@pytest.fixture
def user() -> User:
    return User(id="user-1", email="mette@example.com", name="Mette Jensen")


@pytest.fixture
def job_form() -> JobFormData:
    return JobFormData(
        title="Udvikler",
        company="Acme",
        description=DESCRIPTION,
        contact_person="Maria Hansen",
    )


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        name="Mette Jensen",
        email="mette@example.com",
        experience="5 år med React",
        education="Datamatiker",
        skills="React, TypeScript",
    )


@pytest.fixture
def toasts() -> list[Toast]:
    return []


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def settings() -> Settings:
    return Settings(generation_timeout=5.0)


@pytest.fixture
def make_orchestrator(user, profile, toasts, generator, settings):
    def make(**overrides: Any) -> GenerationOrchestrator:
        opts: dict[str, Any] = dict(
            jobs=CountingJobStore(),
            letters=CountingLetterStore(),
            profiles=MemoryProfileStore({user.id: profile}),
            invoker=GenerationInvoker(generator, timeout=settings.generation_timeout),
            reporter=ToastReporter(sinks=[toasts.append]),
            user=user,
            settings=settings,
        )
        opts.update(overrides)
        return GenerationOrchestrator(**opts).start()

    return make
