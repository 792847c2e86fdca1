"""Danish prompts for cover-letter generation."""
from __future__ import annotations

from typing import Any

SYSTEM_PROMPT = """Du er en professionel karrierevejleder, der specialiserer sig i at skrive personlige og effektive jobansøgninger på dansk.
Din opgave er at generere en overbevisende ansøgning baseret på følgende information.

Følg disse retningslinjer:
1. Brug en formel men personlig tone
2. Fremhæv ansøgerens relevante erfaringer og kompetencer
3. Relatér til virksomhedens behov og jobbets krav
4. Inkluder dato, indledning, afslutning og kontaktoplysninger
5. Vær konkret omkring, hvorfor ansøgeren er et godt match til stillingen
6. Hold længden på mellem 300-500 ord
7. Undgå klichéer og tom floskelsnak"""

_DESCRIPTION_LIMIT = 4000


def create_user_prompt(job_info: dict[str, Any], user_info: dict[str, Any]) -> str:
    description = (job_info.get("description") or "")[:_DESCRIPTION_LIMIT]
    return f"""JOBTITEL: {job_info.get("title", "")}
VIRKSOMHED: {job_info.get("company", "")}
JOBBESKRIVELSE:
{description}

ANSØGERS INFORMATION:
Navn: {user_info.get("name", "")}
Email: {user_info.get("email", "")}
Telefon: {user_info.get("phone", "")}
Adresse: {user_info.get("address", "")}

ERFARING:
{user_info.get("experience", "")}

UDDANNELSE:
{user_info.get("education", "")}

KOMPETENCER:
{user_info.get("skills", "")}

KONTAKTPERSON: {job_info.get("contactPerson") or "Rekrutteringsansvarlig"}

Generer nu en komplet ansøgning på dansk til denne stilling baseret på ovenstående information.
Brug ikke pladsholdere som [Dit navn]."""
