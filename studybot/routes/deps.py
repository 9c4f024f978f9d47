from functools import partial

import httpx
from fastapi import Depends, Request

from studybot.core.config import Settings
from studybot.services.auth_service import SupabaseAuth
from studybot.services.chat_repo import ChatRepository
from studybot.services.chat_session import ChatSession
from studybot.services.relay_service import handle_chat_request

# Collaborators are built once in create_app() and parked on app.state.


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_auth(request: Request) -> SupabaseAuth:
    return request.app.state.auth


def get_repo(request: Request) -> ChatRepository:
    return request.app.state.repo


def get_access_token(request: Request, settings: Settings = Depends(get_app_settings)) -> str | None:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def relay_in_process(
    message: str, settings: Settings, http_client: httpx.AsyncClient
) -> dict:
    _, body = await handle_chat_request({"message": message}, settings, http_client)
    return body


def get_chat_session(
    settings: Settings = Depends(get_app_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    auth: SupabaseAuth = Depends(get_auth),
    repo: ChatRepository = Depends(get_repo),
    access_token: str | None = Depends(get_access_token),
) -> ChatSession:
    relay = partial(relay_in_process, settings=settings, http_client=http_client)
    return ChatSession(auth=auth, repo=repo, relay=relay, access_token=access_token)
