from __future__ import annotations

from cvjob.export import cover_letter_filename, export_letter_text, sanitize_for_filename
from cvjob.models import CoverLetter, JobPosting, UserProfile


def test_sanitize():
    assert sanitize_for_filename("Acme A/S & Co.") == "Acme_AS_Co"
    assert sanitize_for_filename(None) == ""
    assert sanitize_for_filename("  lots   of   space ") == "lots_of_space"


def test_sanitize_cuts_at_word_boundary():
    assert sanitize_for_filename("Senior Frontend Developer", 12) == "Senior"


def test_filename_parts():
    name = cover_letter_filename(full_name="Mette Jensen", job_title="Udvikler", company="Acme")

    assert name == "Mette_Jensen_Udvikler_Acme_Cover_Letter.txt"


def test_filename_without_parts():
    assert cover_letter_filename("pdf") == "Cover_Letter.pdf"


def test_long_filename_is_shortened():
    name = cover_letter_filename(
        full_name="Mette Marie Jensen",
        job_title="Senior Frontend Developer with Extra Responsibilities",
        company="Meget Lang Virksomhedsbetegnelse ApS",
    )

    stem = name[: -len(".txt")]
    assert stem.endswith("_Cover_Letter")
    assert len(stem) <= 50
    assert stem.startswith("Mette_Marie")


def test_export_letter_text(tmp_path):
    letter = CoverLetter(id="l", user_id="u", job_posting_id="j", content="Hej Acme")
    job = JobPosting(id="j", user_id="u", title="Udvikler", company="Acme", description="D")

    path = export_letter_text(letter, job, UserProfile(name="Mette"), tmp_path)

    assert path.name == "Mette_Udvikler_Acme_Cover_Letter.txt"
    assert path.read_text(encoding="utf-8") == "Hej Acme"
