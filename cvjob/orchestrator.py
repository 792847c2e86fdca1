"""
Cover-letter generation workflow.

Runs: validate → save job → fetch profile → generate (timeout/abort) → save letter.

Loading states move idle → initializing → generating → saving → idle; any
failure classifies the error, shows a toast and returns to idle without
rolling back what was already persisted. At most one generation is in
flight per orchestrator; a second submit while busy is rejected.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable

from cvjob.abort import CANCELLED, TIMEOUT, UNMOUNTED, AbortController
from cvjob.config import Settings
from cvjob.errors import AppError, ErrorPhase, classify_error
from cvjob.invoker import GenerationInvoker
from cvjob.lifecycle import MountGuard
from cvjob.log import get_logger
from cvjob.messages import PROGRESS_MESSAGES
from cvjob.models import (
    CoverLetter,
    JobFormData,
    JobPosting,
    User,
    UserProfile,
    utc_now,
    validate_job_form,
)
from cvjob.notify import ToastReporter
from cvjob.progress import GenerationProgress, LoadingState, Phase, PhaseTracker
from cvjob.stores.base import JobStore, LetterStore, ProfileStore

log = get_logger(__name__)

StateListener = Callable[[str, Any], None]

_ERROR_PHASE: dict[Phase, ErrorPhase] = {
    Phase.JOB_SAVE: ErrorPhase.JOB_SAVE,
    Phase.USER_FETCH: ErrorPhase.USER_FETCH,
    Phase.GENERATION: ErrorPhase.GENERATION,
    Phase.LETTER_SAVE: ErrorPhase.LETTER_SAVE,
    Phase.JOB_FETCH: ErrorPhase.JOB_FETCH,
    Phase.LETTER_FETCH: ErrorPhase.LETTER_FETCH,
    Phase.COMPLETE: ErrorPhase.LETTER_SAVE,
}


def error_phase_for(phase: Phase) -> ErrorPhase:
    return _ERROR_PHASE[phase]


class GenerationOrchestrator:
    def __init__(
        self,
        *,
        jobs: JobStore,
        letters: LetterStore,
        profiles: ProfileStore,
        invoker: GenerationInvoker,
        reporter: ToastReporter | None = None,
        user: User | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.jobs = jobs
        self.letters = letters
        self.profiles = profiles
        self.invoker = invoker
        self.reporter = reporter or ToastReporter()
        self.user = user

        self.guard = MountGuard()
        self.tracker = PhaseTracker(strict=self.settings.progress_strict)
        self.tracker.subscribe(self._progress_changed)

        self.loading_state = LoadingState.IDLE
        self.step = 1
        self.error: AppError | None = None
        self.selected_job: JobPosting | None = None
        self.generated_letter: CoverLetter | None = None
        self.generation_attempt = 0

        self._abort: AbortController | None = None
        self._listeners: list[StateListener] = []
        self.guard.on_stop(lambda: self._abort_inflight(UNMOUNTED))

    # ── lifecycle ────────────────────────────────────────────────────────

    def start(self) -> "GenerationOrchestrator":
        self.guard.start()
        return self

    def stop(self) -> None:
        """Teardown: later continuations become no-ops and in-flight work is aborted."""
        self.guard.stop()

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    @property
    def progress(self) -> GenerationProgress:
        return self.tracker.current

    def snapshot(self) -> dict[str, Any]:
        return {
            "loading_state": self.loading_state.value,
            "step": self.step,
            "progress": self.progress,
            "error": self.error,
            "selected_job": self.selected_job,
            "generated_letter": self.generated_letter,
            "generation_attempt": self.generation_attempt,
        }

    # ── guarded setters ──────────────────────────────────────────────────

    def _emit(self, field: str, value: Any) -> None:
        for listener in list(self._listeners):
            listener(field, value)

    def _setter(self, field: str) -> Callable[[Any], None]:
        def apply(value: Any) -> None:
            setattr(self, field, value)
            self._emit(field, value)

        return apply

    def _set(self, field: str, value: Any) -> bool:
        return self.guard.safe_set_state(self._setter(field), value)

    def _set_loading(self, state: LoadingState) -> None:
        if self.loading_state is state:
            return
        if self._set("loading_state", state):
            log.debug("Loading state → %s", state.value)

    def _update_phase(self, phase: Phase, progress: int, message: str | None = None) -> None:
        if self.guard.is_live():
            self.tracker.update_phase(phase, progress, message or PROGRESS_MESSAGES[phase.value])

    def _progress_changed(self, progress: GenerationProgress) -> None:
        self._emit("progress", progress)

    def _toast(self, key: str) -> None:
        if self.guard.is_live():
            self.reporter.message(key)

    def _surface(self, error: AppError) -> None:
        log.error("%r", error)
        if self._set("error", error):
            self.reporter.report_error(error)

    def _abort_inflight(self, reason: str) -> None:
        if self._abort is not None:
            self._abort.abort(reason)

    # ── operations ───────────────────────────────────────────────────────

    async def submit_job(self, job_data: JobFormData) -> CoverLetter | None:
        """Save the job, generate a letter and save it. Returns the letter or None."""
        if not self.guard.is_live():
            log.warning("submit_job called on an orchestrator that is not started")
            return None

        if self.user is None:
            log.error("Cannot generate letter: no authenticated user")
            self._toast("loginRequired")
            return None

        if self.loading_state is not LoadingState.IDLE:
            log.warning("Generation already in progress, state: %s", self.loading_state.value)
            self._toast("generationInProgress")
            return None

        try:
            validate_job_form(job_data, self.settings.min_description_length)
        except AppError as exc:
            log.info("Job form rejected: %s", exc.details.get("fields"))
            self._surface(exc)
            return None

        # Claimed synchronously, before the first await.
        self._set_loading(LoadingState.INITIALIZING)
        self.generation_attempt += 1
        attempt = self.generation_attempt
        abort = AbortController()
        self._abort = abort
        self._set("error", None)
        log.info("Starting generation attempt #%d for %s @ %s", attempt, job_data.title, job_data.company)

        self.tracker.reset()
        phase = Phase.JOB_SAVE
        self._update_phase(phase, 10)
        try:
            existing_id = job_data.id or (self.selected_job.id if self.selected_job else None)
            job = await self.jobs.save(job_data, self.user.id, existing_id)
            self._set("selected_job", job)

            phase = Phase.USER_FETCH
            self._update_phase(phase, 25)
            profile = await self._fetch_profile()

            phase = Phase.GENERATION
            self._set_loading(LoadingState.GENERATING)
            self._update_phase(phase, 40)
            content = await self.invoker.generate(
                job, profile, abort=abort, timeout=self.settings.generation_timeout
            )

            if not self.guard.is_live():
                log.warning("Torn down after generation completed; letter not saved")
                return None

            phase = Phase.LETTER_SAVE
            self._set_loading(LoadingState.SAVING)
            self._update_phase(phase, 80)
            letter = await self.letters.insert(self.user.id, job.id, content)

            self._update_phase(Phase.COMPLETE, 100)
            self._set("generated_letter", letter)
            self._set("step", 2)
            self._toast("letterGenerated")
            log.info("Attempt #%d: letter %s saved for job %s", attempt, letter.id, job.id)
            return letter
        except Exception as exc:
            if abort.aborted and abort.reason != TIMEOUT:
                log.info("Attempt #%d aborted (%s)", attempt, abort.reason)
                if abort.reason == CANCELLED:
                    self._toast("generationCancelled")
                return None
            self._surface(classify_error(exc, error_phase_for(phase)))
            return None
        finally:
            abort.clear_timeout()
            if self._abort is abort:
                self._abort = None
            self._set_loading(LoadingState.IDLE)

    async def _fetch_profile(self) -> UserProfile:
        profile = await self.profiles.fetch_profile(self.user.id)
        if not profile.email:
            profile = replace(profile, email=self.user.email)
        if not profile.name and self.user.name:
            profile = replace(profile, name=self.user.name)
        if not profile.is_complete():
            self._toast("incompleteProfile")
        return profile

    def cancel(self) -> bool:
        """Abort the in-flight generation; the attempt ends idle without an error."""
        if self._abort is None:
            return False
        self._abort.abort(CANCELLED)
        return True

    async def edit_letter(self, updated_content: str) -> CoverLetter | None:
        if self.generated_letter is None:
            self._toast("noLetterToEdit")
            return None
        if self.user is None:
            self._toast("loginRequired")
            return None
        if self.loading_state is not LoadingState.IDLE:
            self._toast("generationInProgress")
            return None

        current = self.generated_letter
        self._set_loading(LoadingState.SAVING)
        self._update_phase(Phase.LETTER_SAVE, 50)
        try:
            updated_at = utc_now()
            await self.letters.update(current.id, updated_content, updated_at)
            updated = replace(current, content=updated_content, updated_at=updated_at)
            self._set("generated_letter", updated)
            self._update_phase(Phase.COMPLETE, 100)
            self._toast("letterUpdated")
            return updated
        except Exception as exc:
            self._surface(classify_error(exc, ErrorPhase.LETTER_SAVE))
            return None
        finally:
            self._set_loading(LoadingState.IDLE)

    async def fetch_job(self, job_id: str) -> JobPosting | None:
        try:
            job = await self.jobs.fetch(job_id)
        except Exception as exc:
            self._surface(classify_error(exc, ErrorPhase.JOB_FETCH))
            return None
        if job is None:
            log.info("No job found with ID %s", job_id)
            self._toast("jobNotFound")
            return None
        self._set("selected_job", job)
        return job

    async def fetch_letter(self, letter_id: str) -> CoverLetter | None:
        if self.user is None:
            self._toast("loginRequired")
            return None
        try:
            letter = await self.letters.fetch(letter_id)
        except Exception as exc:
            self._surface(classify_error(exc, ErrorPhase.LETTER_FETCH))
            return None
        if letter is None:
            log.info("No letter found with ID %s", letter_id)
            self._toast("letterNotFound")
            return None
        if letter.user_id != self.user.id:
            log.warning("User %s denied access to letter %s", self.user.id, letter_id)
            self._toast("accessDenied")
            return None

        self._set("generated_letter", letter)
        try:
            job = await self.jobs.fetch(letter.job_posting_id)
        except Exception as exc:
            log.error("Error fetching job %s for letter: %s", letter.job_posting_id, exc)
            job = None
        if job is not None:
            self._set("selected_job", job)
        self._set("step", 2)
        return letter

    def reset_error(self) -> None:
        self._set("error", None)
        if self.guard.is_live():
            self.tracker.reset()

    async def save_job_as_draft(self, job_data: JobFormData) -> JobPosting:
        """Persist a job without generating; persistence failures are re-raised."""
        if self.user is None:
            raise classify_error(
                PermissionError("Du skal være logget ind for at gemme et job"),
                ErrorPhase.JOB_SAVE,
            )
        log.info("Saving job as draft for user %s", self.user.id)
        job = await self.jobs.save(job_data, self.user.id, job_data.id)
        self._set("selected_job", job)
        self._toast("draftSaved")
        return job

    def save_letter(self) -> None:
        """Letters are stored as soon as they exist; this only confirms it."""
        self._toast("letterSaved")
