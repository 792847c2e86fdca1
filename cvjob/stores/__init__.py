from dataclasses import dataclass
from typing import Callable

from .base import JobStore, LetterStore, ProfileStore
from .csv_store import CsvJobStore, CsvLetterStore
from .memory import MemoryJobStore, MemoryLetterStore, MemoryProfileStore
from .profile import YamlProfileStore
from .rest import RestJobStore, RestLetterStore, RestProfileStore, RestTable

from cvjob.config import Settings
from cvjob.log import get_logger

log = get_logger(__name__)

__all__ = [
    "JobStore", "LetterStore", "ProfileStore", "Stores",
    "CsvJobStore", "CsvLetterStore", "YamlProfileStore",
    "MemoryJobStore", "MemoryLetterStore", "MemoryProfileStore",
    "RestJobStore", "RestLetterStore", "RestProfileStore", "RestTable",
    "get_stores",
]


@dataclass
class Stores:
    jobs: JobStore
    letters: LetterStore
    profiles: ProfileStore


def get_stores(settings: Settings, env_getter: Callable[[str], str]) -> Stores:
    backend = settings.store_backend

    if backend == "rest":
        base_url = env_getter("CVJOB_REST_URL")
        api_key = env_getter("CVJOB_API_KEY")
        if base_url and api_key:
            token = env_getter("CVJOB_ACCESS_TOKEN")
            log.info("Using remote tables at %s", base_url)

            def table(name: str) -> RestTable:
                return RestTable(
                    base_url, name, api_key, token,
                    max_retries=settings.retry_max_retries,
                    initial_delay=settings.retry_initial_delay,
                    retry_server_errors=settings.retry_server_errors,
                )

            return Stores(
                jobs=RestJobStore(table("job_postings")),
                letters=RestLetterStore(table("cover_letters")),
                profiles=RestProfileStore(table("profiles")),
            )
        log.warning("CVJOB_REST_URL / CVJOB_API_KEY missing — falling back to CSV tables")

    if backend == "memory":
        log.info("Using in-memory tables (nothing is persisted)")
        return Stores(MemoryJobStore(), MemoryLetterStore(), MemoryProfileStore())

    log.info("Using local CSV tables")
    return Stores(CsvJobStore(), CsvLetterStore(), YamlProfileStore())
