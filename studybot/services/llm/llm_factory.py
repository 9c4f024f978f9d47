import httpx

from studybot.core.config import Settings
from studybot.core.errors import ConfigurationError
from studybot.services.llm.base import LLMClient
from studybot.services.llm.gemini_client import GeminiClient


def get_llm(settings: Settings, http_client: httpx.AsyncClient) -> LLMClient:
    if not settings.GEMINI_API_KEY:
        raise ConfigurationError()
    return GeminiClient(
        http_client,
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        api_base=settings.GEMINI_API_BASE,
    )
