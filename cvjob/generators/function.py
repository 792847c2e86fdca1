"""Hosted serverless function that generates the letter server-side."""
from __future__ import annotations

import asyncio
from typing import Any

import requests

from cvjob.errors import AppError, ErrorKind
from cvjob.generators.base import LetterGenerator
from cvjob.log import get_logger

log = get_logger(__name__)

FUNCTION_NAME = "generate-cover-letter"


class FunctionGenerator(LetterGenerator):
    def __init__(
        self,
        functions_url: str,
        api_key: str = "",
        access_token: str = "",
        timeout: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        self.url = f"{functions_url.rstrip('/')}/{FUNCTION_NAME}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Content-Type": "application/json"}
        if api_key:
            self.headers["apikey"] = api_key
        if access_token or api_key:
            self.headers["Authorization"] = f"Bearer {access_token or api_key}"

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        r = self.session.post(self.url, json=payload, headers=self.headers, timeout=self.timeout)
        r.raise_for_status()
        data = r.json()
        if not isinstance(data, dict):
            raise AppError("Ugyldigt svar fra genereringstjenesten", ErrorKind.SERVER)
        if data.get("error"):
            log.error("Function error body: %s", data.get("error"))
            raise AppError(
                "Fejl ved generering af ansøgning. Prøv igen senere.",
                ErrorKind.SERVER,
                details={"error": data.get("error"), "info": data.get("details")},
            )
        return data

    async def generate(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await asyncio.to_thread(self._post, payload)
