#!/usr/bin/env python3
"""Entry point: generate one cover letter from a job YAML file."""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from cvjob.config import get_env
from cvjob.log import get_logger

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a Danish cover letter for a job posting.")
    parser.add_argument("--job", required=True, type=Path, help="YAML file with title, company, description, ...")
    parser.add_argument("--user-id", default=get_env("CVJOB_USER_ID", "local"))
    parser.add_argument("--email", default=get_env("CVJOB_USER_EMAIL"))
    parser.add_argument("--name", default=get_env("CANDIDATE_NAME"))
    parser.add_argument("--out", type=Path, default=None, help="Export directory (default: exports/)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if not args.job.exists():
        log.error("Job file not found: %s", args.job)
        return 1

    from cvjob.models import User
    from cvjob.runner import load_job_file, run

    job = load_job_file(args.job)
    user = User(id=args.user_id, email=args.email, name=args.name)
    result = asyncio.run(run(job, user, export_dir=args.out))

    if result["letter"] is None:
        log.error("No letter was generated.")
        for toast in result["toasts"]:
            log.error("  %s: %s", toast.title, toast.description)
        return 1

    log.info("Run complete.")
    log.info("  Job: %s @ %s", result["job"].title, result["job"].company)
    log.info("  Letter: %s", result["letter"].id)
    if result["export_path"]:
        log.info("  Exported: %s", result["export_path"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
