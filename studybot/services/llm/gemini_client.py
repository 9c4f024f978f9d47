import logging
import time
from typing import Any

import httpx

from studybot.core.errors import UpstreamError
from studybot.services.llm.base import LLMClient

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response from AI"


def build_request_body(prompt: str) -> dict:
    return {"contents": [{"parts": [{"text": prompt}]}]}


def extract_error_message(data: Any) -> str:
    error = data.get("error") if isinstance(data, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    return message or UpstreamError.default_message


def extract_reply(data: Any) -> str:
    """
    candidates[0].content.parts[0].text, or the fallback text when any
    step of that path is missing or empty.
    """
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return NO_RESPONSE_TEXT
    return text if isinstance(text, str) and text else NO_RESPONSE_TEXT


class GeminiClient(LLMClient):
    def __init__(self, http_client: httpx.AsyncClient, api_key: str, model: str, api_base: str):
        self.http = http_client
        self.api_key = api_key
        self.url = f"{api_base.rstrip('/')}/models/{model}:generateContent"
        self.model = model

    async def generate(self, prompt: str) -> str:
        t0 = time.perf_counter()
        resp = await self.http.post(
            self.url,
            params={"key": self.api_key},
            json=build_request_body(prompt),
        )
        data = resp.json()
        latency_s = time.perf_counter() - t0

        if not resp.is_success:
            message = extract_error_message(data)
            logger.warning("Gemini error status=%s message=%s", resp.status_code, message)
            raise UpstreamError(message, status_code=resp.status_code)

        logger.info("Gemini model=%s latency=%.2fs", self.model, latency_s)
        return extract_reply(data)
