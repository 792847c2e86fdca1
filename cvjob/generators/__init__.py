from typing import Callable

from .base import LetterGenerator
from .function import FunctionGenerator
from .openai_client import OpenAIGenerator
from .template import TemplateGenerator

from cvjob.config import Settings
from cvjob.log import get_logger

log = get_logger(__name__)

__all__ = [
    "LetterGenerator", "FunctionGenerator", "OpenAIGenerator", "TemplateGenerator",
    "get_generator",
]


def get_generator(settings: Settings, env_getter: Callable[[str], str]) -> LetterGenerator:
    functions_url = env_getter("CVJOB_FUNCTIONS_URL")
    if functions_url:
        log.info("Registered generator: hosted function")
        return FunctionGenerator(
            functions_url,
            api_key=env_getter("CVJOB_API_KEY"),
            access_token=env_getter("CVJOB_ACCESS_TOKEN"),
            timeout=settings.generation_timeout + 5,
        )

    api_key = env_getter("OPENAI_API_KEY")
    if api_key:
        log.info("Registered generator: OpenAI (%s)", settings.openai_model)
        return OpenAIGenerator(
            api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            base_url=env_getter("OPENAI_BASE_URL") or None,
        )

    log.info("No AI credentials found — using TemplateGenerator")
    return TemplateGenerator()
