"""Read the applicant profile from config/profile.yaml."""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import yaml

from cvjob.config import PROFILE_PATH
from cvjob.log import get_logger
from cvjob.models import UserProfile
from cvjob.stores.base import ProfileStore

log = get_logger(__name__)


def load_profile(path: Path | None = None) -> dict[str, Any]:
    path = path or PROFILE_PATH
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    # Accept both a flat file and one nested under "profile:".
    if isinstance(data.get("profile"), dict):
        nested = dict(data["profile"])
        if "summary" in nested and "experience" not in nested:
            nested["experience"] = nested.pop("summary")
        data = {**data, **nested}
        data.pop("profile", None)
    return data


class YamlProfileStore(ProfileStore):
    """Single-applicant profile; ``users:`` maps user ids to their own block."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or PROFILE_PATH

    def _read(self, user_id: str) -> UserProfile:
        data = load_profile(self.path)
        users = data.get("users")
        if isinstance(users, dict) and user_id in users:
            data = users[user_id] or {}
        if not data:
            log.debug("No profile on file for user %s", user_id)
        return UserProfile.from_row(data)

    async def fetch_profile(self, user_id: str) -> UserProfile:
        return await asyncio.to_thread(self._read, user_id)
