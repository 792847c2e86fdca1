"""Load settings and env configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from cvjob.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
PROFILE_PATH: Path = CONFIG_DIR / "profile.yaml"
DATA_DIR: Path = ROOT_DIR / "data"
EXPORT_DIR: Path = ROOT_DIR / "exports"

STORE_BACKENDS = ("csv", "rest", "memory")


@dataclass(frozen=True)
class Settings:
    generation_timeout: float = 45.0
    generation_retries: int = 0
    retry_max_retries: int = 3
    retry_initial_delay: float = 1.0
    retry_server_errors: bool = False
    locale: str = "da-DK"
    min_description_length: int = 100
    progress_strict: bool = False
    store_backend: str = "csv"
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def settings_path() -> Path:
    override = get_env("CVJOB_SETTINGS_PATH")
    return Path(override) if override else SETTINGS_PATH


def load_settings(path: Path | None = None) -> Settings:
    """Defaults overlaid with config/settings.yaml; unknown keys are ignored."""
    path = path or settings_path()
    if not path.exists():
        log.debug("No settings file at %s — using defaults", path)
        return Settings()

    with open(path, "r", encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    known = {fld.name for fld in fields(Settings)}
    values: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            log.warning("Ignoring unknown setting %r in %s", key, path.name)
            continue
        values[key] = value

    backend = values.get("store_backend", Settings.store_backend)
    if backend not in STORE_BACKENDS:
        log.warning("Unknown store_backend %r — falling back to csv", backend)
        values["store_backend"] = "csv"

    settings = Settings(**values)
    log.debug("Loaded settings from %s", path)
    return settings


def ensure_dirs() -> None:
    for d in (DATA_DIR, EXPORT_DIR):
        d.mkdir(parents=True, exist_ok=True)
