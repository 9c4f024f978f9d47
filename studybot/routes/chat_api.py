import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from studybot.core.config import Settings
from studybot.routes.deps import get_app_settings, get_http_client
from studybot.routes.schemas import ChatResponse, ErrorResponse
from studybot.services.relay_service import SERVER_ERROR_TEXT, handle_chat_request

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
):
    try:
        payload = await request.json()
    except Exception:
        logger.warning("Unreadable /api/chat body")
        return JSONResponse({"error": SERVER_ERROR_TEXT}, status_code=500)

    status, body = await handle_chat_request(payload, settings, http_client)
    return JSONResponse(body, status_code=status)
