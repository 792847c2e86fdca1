from __future__ import annotations

import pytest

from cvjob.config import Settings
from cvjob.models import JobFormData, User
from cvjob.runner import build_orchestrator, load_job_file, run

from tests.conftest import DESCRIPTION


@pytest.fixture(autouse=True)
def no_ai_backends(monkeypatch):
    for key in ("CVJOB_FUNCTIONS_URL", "OPENAI_API_KEY"):
        monkeypatch.delenv(key, raising=False)


def test_load_job_file(tmp_path):
    path = tmp_path / "job.yaml"
    path.write_text(
        "job:\n  title: Udvikler\n  company: Acme\n  description: Beskrivelse\n  url: https://example.com\n",
        encoding="utf-8",
    )

    job = load_job_file(path)

    assert job.title == "Udvikler"
    assert job.url == "https://example.com"


@pytest.mark.asyncio
async def test_run_exports_template_letter(tmp_path):
    job = JobFormData(title="Udvikler", company="Acme", description=DESCRIPTION)
    user = User(id="local", email="mette@example.com", name="Mette Jensen")

    result = await run(job, user, settings=Settings(store_backend="memory"), export_dir=tmp_path)

    assert result["error"] is None
    assert result["letter"].job_posting_id == result["job"].id
    assert result["export_path"].endswith("Mette_Jensen_Udvikler_Acme_Cover_Letter.txt")
    assert "Med venlig hilsen," in (tmp_path / "Mette_Jensen_Udvikler_Acme_Cover_Letter.txt").read_text(encoding="utf-8")
    assert "Ansøgning genereret" in [t.title for t in result["toasts"]]


@pytest.mark.asyncio
async def test_run_reports_invalid_job(tmp_path):
    result = await run(
        JobFormData(title="", company="Acme", description=DESCRIPTION),
        User(id="local", email=""),
        settings=Settings(store_backend="memory"),
        export_dir=tmp_path,
    )

    assert result["letter"] is None
    assert result["export_path"] is None
    assert result["toasts"][0].title == "Manglende felter"


def test_retry_settings_reach_the_invoker():
    settings = Settings(store_backend="memory", generation_retries=2, retry_server_errors=True)

    orch = build_orchestrator(settings, User(id="local", email=""))

    assert orch.invoker.retries == 2
    assert orch.invoker.retry_server_errors is True
