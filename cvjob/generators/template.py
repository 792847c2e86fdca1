"""Deterministic Danish fallback letter, used when no AI backend is configured."""
from __future__ import annotations

from datetime import date
from typing import Any

from cvjob.generators.base import LetterGenerator
from cvjob.log import get_logger

log = get_logger(__name__)

_MONTHS = (
    "januar", "februar", "marts", "april", "maj", "juni",
    "juli", "august", "september", "oktober", "november", "december",
)


def danish_date(d: date) -> str:
    return f"{d.day}. {_MONTHS[d.month - 1]} {d.year}"


def simple_letter(job_info: dict[str, Any], user_info: dict[str, Any], today: date | None = None) -> str:
    title = job_info.get("title") or "den annoncerede stilling"
    company = job_info.get("company") or "jeres virksomhed"
    contact = job_info.get("contactPerson") or "Rekrutteringsansvarlig"
    if contact == "Hiring Manager":
        contact = "Rekrutteringsansvarlig"

    signature = [user_info.get("name") or "Dit navn"]
    for key in ("phone", "email", "address"):
        if user_info.get(key):
            signature.append(user_info[key])

    skills = user_info.get("skills") or ""
    skills_line = f" Mine kompetencer inden for {skills} passer godt til rollen." if skills else ""

    return f"""{danish_date(today or date.today())}

Kære {contact},

Jeg skriver for at ansøge om stillingen som {title} hos {company}.

Med min baggrund og erfaring mener jeg, at jeg vil være et godt match til denne rolle.{skills_line} Jeg er særligt interesseret i at blive en del af jeres team.

Jeg ser frem til muligheden for at drøfte, hvordan jeg kan bidrage til {company}.

Med venlig hilsen,

""" + "\n".join(signature)


class TemplateGenerator(LetterGenerator):
    def __init__(self, today: date | None = None) -> None:
        self.today = today

    async def generate(self, payload: dict[str, Any]) -> dict[str, Any]:
        log.debug("No AI backend configured — using template letter")
        return {"content": simple_letter(payload.get("jobInfo", {}), payload.get("userInfo", {}), self.today)}
