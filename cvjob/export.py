"""Write cover letters to disk with standardized file names."""
from __future__ import annotations

import re
from pathlib import Path

from cvjob.config import EXPORT_DIR
from cvjob.log import get_logger
from cvjob.models import CoverLetter, JobPosting, UserProfile

log = get_logger(__name__)

_SPECIAL = re.compile(r"""[&%$#@!*()\[\]{}<>:;'"\\|,/+^~=?.]""")
SUFFIX = "Cover_Letter"


def sanitize_for_filename(text: str | None, max_length: int = 30) -> str:
    if not text:
        return ""
    sanitized = _SPECIAL.sub("", text)
    sanitized = re.sub(r"\s+", "_", sanitized.strip())
    sanitized = re.sub(r"__+", "_", sanitized)
    if max_length > 0 and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]
        # Avoid cutting mid-word when there is a word boundary to fall back to.
        if "_" in sanitized:
            sanitized = sanitized[: sanitized.rindex("_")]
    return sanitized


def cover_letter_filename(
    extension: str = "txt",
    *,
    full_name: str | None = None,
    job_title: str | None = None,
    company: str | None = None,
    max_length: int = 50,
) -> str:
    """``Full_Name_Job_Title_Company_Cover_Letter.<ext>``, shortened to ``max_length``."""
    parts = [
        sanitize_for_filename(value, 20)
        for value in (full_name, job_title, company)
        if value
    ]
    parts = [p for p in parts if p]
    parts.append(SUFFIX)
    filename = "_".join(parts)

    if len(filename) > max_length:
        name_part = sanitize_for_filename(full_name, 15) + "_" if full_name else ""
        suffix = "_" + SUFFIX
        remaining = max_length - len(name_part) - len(suffix)
        if remaining > 5:
            job_part = sanitize_for_filename(job_title, remaining // 2) if job_title else ""
            company_part = (
                "_" + sanitize_for_filename(company, remaining - len(job_part) - 1)
                if company
                else ""
            )
            filename = (name_part + job_part + company_part).strip("_") + suffix
        else:
            filename = name_part[: max_length - len(suffix)].rstrip("_") + suffix

    return f"{filename}.{extension}"


def export_letter_text(
    letter: CoverLetter,
    job: JobPosting | None = None,
    profile: UserProfile | None = None,
    directory: Path | None = None,
) -> Path:
    directory = directory or EXPORT_DIR
    directory.mkdir(parents=True, exist_ok=True)
    name = cover_letter_filename(
        "txt",
        full_name=profile.name if profile else None,
        job_title=job.title if job else None,
        company=job.company if job else None,
    )
    path = directory / name
    path.write_text(letter.content, encoding="utf-8")
    log.info("Letter exported → %s", path)
    return path
