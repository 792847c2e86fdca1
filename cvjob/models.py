"""Data models for job postings, cover letters and users."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Any

from cvjob.errors import AppError, validation_error

MIN_DESCRIPTION_LENGTH = 100


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_deadline(deadline: str | None) -> str | None:
    if deadline is None or not deadline.strip():
        return None
    return deadline.strip()


def _pick(cls: type, row: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in row.items() if k in names}


@dataclass
class JobFormData:
    title: str
    company: str
    description: str
    id: str | None = None
    contact_person: str | None = None
    url: str | None = None
    deadline: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JobFormData":
        values = _pick(cls, data)
        for key in ("title", "company", "description"):
            values[key] = str(values.get(key) or "")
        return cls(**values)


@dataclass
class JobPosting:
    id: str
    user_id: str
    title: str
    company: str
    description: str
    contact_person: str | None = None
    url: str | None = None
    deadline: str | None = None
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "JobPosting":
        values = _pick(cls, row)
        for key in ("contact_person", "url", "deadline"):
            if values.get(key) == "":
                values[key] = None
        return cls(**values)

    def to_row(self) -> dict[str, Any]:
        return asdict(self)

    def to_form(self) -> JobFormData:
        return JobFormData(
            id=self.id,
            title=self.title,
            company=self.company,
            description=self.description,
            contact_person=self.contact_person,
            url=self.url,
            deadline=self.deadline,
        )


@dataclass
class CoverLetter:
    id: str
    user_id: str
    job_posting_id: str
    content: str
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "CoverLetter":
        return cls(**_pick(cls, row))

    def to_row(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class UserProfile:
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    experience: str = ""
    education: str = ""
    skills: str = ""

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "UserProfile":
        values = _pick(cls, row)
        for key, value in values.items():
            if isinstance(value, list):
                values[key] = ", ".join(str(v) for v in value)
            elif value is None:
                values[key] = ""
            else:
                values[key] = str(value)
        return cls(**values)

    def is_complete(self) -> bool:
        return all((self.name, self.email, self.experience, self.education, self.skills))


@dataclass
class User:
    id: str
    email: str
    name: str = ""


def validate_job_form(
    data: JobFormData, min_description_length: int = MIN_DESCRIPTION_LENGTH
) -> None:
    """Raise a validation AppError listing every offending field."""
    errors: dict[str, str] = {}

    if not data.title.strip():
        errors["title"] = "Jobtitel er påkrævet"
    if not data.company.strip():
        errors["company"] = "Virksomhedsnavn er påkrævet"

    description = data.description.strip()
    if not description:
        errors["description"] = "Jobbeskrivelse er påkrævet"
    elif len(description) < min_description_length:
        errors["description"] = (
            f"Jobbeskrivelse skal være på mindst {min_description_length} tegn"
        )

    if data.url and data.url.strip() and not data.url.strip().startswith(("http://", "https://")):
        errors["url"] = "Link skal starte med http:// eller https://"

    if errors:
        raise validation_error(errors)


def is_valid_job_form(data: JobFormData, min_description_length: int = MIN_DESCRIPTION_LENGTH) -> bool:
    try:
        validate_job_form(data, min_description_length)
    except AppError:
        return False
    return True
