"""
One-shot cover-letter run.

Runs: settings → stores/generator → orchestrator → submit job → export letter.
"""
from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from cvjob.config import Settings, ensure_dirs, get_env, load_settings
from cvjob.export import export_letter_text
from cvjob.generators import get_generator
from cvjob.invoker import GenerationInvoker
from cvjob.log import get_logger
from cvjob.models import JobFormData, User
from cvjob.notify import Toast, ToastReporter
from cvjob.orchestrator import GenerationOrchestrator
from cvjob.stores import get_stores

log = get_logger(__name__)


def load_job_file(path: Path) -> JobFormData:
    with open(path, "r", encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}
    return JobFormData.from_dict(data.get("job", data))


def build_orchestrator(
    settings: Settings,
    user: User | None,
    reporter: ToastReporter | None = None,
) -> GenerationOrchestrator:
    stores = get_stores(settings, get_env)
    reporter = reporter or ToastReporter()

    def on_retry(exc: BaseException, attempt: int) -> None:
        reporter.show(Toast(
            "Netværksfejl",
            f"Forsøger igen ({attempt}/{settings.generation_retries})...",
            "destructive",
        ))

    invoker = GenerationInvoker(
        get_generator(settings, get_env),
        timeout=settings.generation_timeout,
        retries=settings.generation_retries,
        initial_delay=settings.retry_initial_delay,
        locale=settings.locale,
        retry_server_errors=settings.retry_server_errors,
        on_retry=on_retry,
    )
    return GenerationOrchestrator(
        jobs=stores.jobs,
        letters=stores.letters,
        profiles=stores.profiles,
        invoker=invoker,
        reporter=reporter,
        user=user,
        settings=settings,
    )


async def run(
    job: JobFormData,
    user: User,
    *,
    settings: Settings | None = None,
    export_dir: Path | None = None,
) -> dict[str, Any]:
    settings = settings or load_settings()
    ensure_dirs()

    toasts: list[Toast] = []
    reporter = ToastReporter(sinks=[toasts.append])
    orchestrator = build_orchestrator(settings, user, reporter).start()
    letter = None
    export_path = None
    try:
        letter = await orchestrator.submit_job(job)
        if letter is not None:
            profile = await orchestrator.profiles.fetch_profile(user.id)
            if not profile.name:
                profile = replace(profile, name=user.name)
            export_path = export_letter_text(
                letter, orchestrator.selected_job, profile, export_dir
            )
    finally:
        orchestrator.stop()

    return {
        "letter": letter,
        "job": orchestrator.selected_job,
        "export_path": str(export_path) if export_path else None,
        "toasts": toasts,
        "error": orchestrator.error,
    }
