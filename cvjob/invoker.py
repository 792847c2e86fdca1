"""Generation invoker: one bounded, abortable AI call per attempt."""
from __future__ import annotations

from typing import Any, Callable

from cvjob.abort import AbortController
from cvjob.errors import AppError, ErrorKind, is_retryable
from cvjob.generators.base import LetterGenerator
from cvjob.log import get_logger, truncate_for_log
from cvjob.models import JobPosting, UserProfile
from cvjob.retry import retry_with_backoff

log = get_logger(__name__)

DEFAULT_TIMEOUT = 45.0


def build_payload(job: JobPosting, profile: UserProfile, locale: str = "da-DK") -> dict[str, Any]:
    return {
        "jobInfo": {
            "title": job.title or "Unavailable Position",
            "company": job.company or "Unavailable Company",
            "description": job.description or "No job description provided",
            "contactPerson": job.contact_person or "Hiring Manager",
            "url": job.url or "",
            "deadline": job.deadline or "",
        },
        "userInfo": {
            "name": profile.name or "Job Seeker",
            "email": profile.email,
            "phone": profile.phone,
            "address": profile.address,
            "education": profile.education,
            "experience": profile.experience,
            "skills": profile.skills,
        },
        "locale": locale,
    }


class GenerationInvoker:
    """Calls the generator under the controller's timeout.

    ``retries`` > 0 opts in to backoff retries for network/timeout failures
    that happen before the controller itself aborts; the default is a
    single attempt.
    """

    def __init__(
        self,
        generator: LetterGenerator,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = 0,
        initial_delay: float = 1.0,
        locale: str = "da-DK",
        retry_server_errors: bool = False,
        on_retry: Callable[[BaseException, int], None] | None = None,
    ) -> None:
        self.generator = generator
        self.timeout = timeout
        self.retries = retries
        self.initial_delay = initial_delay
        self.locale = locale
        self.retry_server_errors = retry_server_errors
        self.on_retry = on_retry

    async def generate(
        self,
        job: JobPosting,
        profile: UserProfile,
        abort: AbortController | None = None,
        timeout: float | None = None,
    ) -> str:
        abort = abort or AbortController()
        payload = build_payload(job, profile, self.locale)
        log.info(
            "Generating letter for %s @ %s (%s)",
            job.title, job.company, truncate_for_log(job.description),
        )

        async def attempt() -> dict[str, Any]:
            return await abort.run(self.generator.generate(payload))

        abort.set_timeout(timeout if timeout is not None else self.timeout)
        try:
            if self.retries > 0:
                result = await retry_with_backoff(
                    attempt,
                    max_retries=self.retries,
                    initial_delay=self.initial_delay,
                    should_retry=lambda exc: not abort.aborted and is_retryable(
                        exc, retry_server_errors=self.retry_server_errors
                    ),
                    on_retry=self.on_retry,
                )
            else:
                result = await attempt()
        finally:
            abort.clear_timeout()

        content = result.get("content") if isinstance(result, dict) else None
        if not isinstance(content, str) or not content.strip():
            log.error("No content returned from generator: %r", result)
            raise AppError("Ingen ansøgning blev genereret. Prøv igen.", ErrorKind.SERVER)

        log.info("Letter generated (%d chars)", len(content))
        return content
