"""Generate letters with an OpenAI-compatible chat completion endpoint."""
from __future__ import annotations

from typing import Any

from cvjob.errors import AppError, ErrorKind
from cvjob.generators.base import LetterGenerator
from cvjob.generators.prompts import SYSTEM_PROMPT, create_user_prompt
from cvjob.log import get_logger

log = get_logger(__name__)


class OpenAIGenerator(LetterGenerator):
    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        base_url: str | None = None,
        client: Any = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        if client is None:
            from openai import AsyncOpenAI

            client = AsyncOpenAI(api_key=api_key, base_url=base_url or None, max_retries=0)
        self.client = client

    async def generate(self, payload: dict[str, Any]) -> dict[str, Any]:
        prompt = create_user_prompt(payload.get("jobInfo", {}), payload.get("userInfo", {}))
        log.debug("Calling %s (prompt %d chars)", self.model, len(prompt))
        r = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
        )
        if not r.choices:
            raise AppError("Invalid response from OpenAI", ErrorKind.SERVER)
        content = (r.choices[0].message.content or "").strip()
        return {"content": content}
