from abc import ABC, abstractmethod
from typing import Any


class LetterGenerator(ABC):
    @abstractmethod
    async def generate(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Return ``{"content": str}`` for a ``{jobInfo, userInfo, locale}`` payload."""
