from __future__ import annotations

import logging
from typing import Any

import httpx

from studybot.core.config import Settings
from studybot.core.errors import InvalidRequestError, StudyBotError
from studybot.services.llm.llm_factory import get_llm

logger = logging.getLogger(__name__)

SERVER_ERROR_TEXT = "Server error"


async def relay_message(message: Any, settings: Settings, http_client: httpx.AsyncClient) -> str:
    """
    Forwards one message verbatim to the AI API and returns its reply text.
    Presence is checked before the key so a bad request never needs a secret.
    """
    if not message:
        raise InvalidRequestError()

    llm = get_llm(settings, http_client)
    return await llm.generate(message)


async def handle_chat_request(
    payload: Any, settings: Settings, http_client: httpx.AsyncClient
) -> tuple[int, dict[str, str]]:
    """
    Whole /api/chat contract: returns (status, body) where body is
    {"reply": ...} on success or {"error": ...} otherwise.
    """
    try:
        if not isinstance(payload, dict):
            raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
        reply = await relay_message(payload.get("message"), settings, http_client)
        return 200, {"reply": reply}
    except StudyBotError as e:
        return e.status_code, {"error": e.message}
    except Exception:
        logger.exception("Chat relay failed")
        return 500, {"error": SERVER_ERROR_TEXT}
