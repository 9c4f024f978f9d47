"""
Shared fakes for the auth service, Gemini API and database.
"""

import json

import httpx
import pytest

from studybot.core.config import Settings
from studybot.core.errors import AuthError
from studybot.db.session import build_engine, build_sessionmaker, init_db
from studybot.services.auth_service import AuthSession, AuthUser
from studybot.services.chat_repo import ChatRepository

VALID_TOKEN = "token-123"
TEST_USER = AuthUser(id="user-1", email="student@example.com")


def make_settings(**overrides) -> Settings:
    values = dict(
        GEMINI_API_KEY="test-key",
        DATABASE_URL="sqlite://",
        SUPABASE_URL="https://auth.example.test",
        SUPABASE_ANON_KEY="anon-key",
        SITE_URL="http://localhost:8000",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeGemini:
    """httpx transport handler that records requests and replays a canned answer"""

    def __init__(self, status_code: int = 200, payload=None, content: bytes | None = None):
        self.status_code = status_code
        self.payload = payload if payload is not None else gemini_reply("ok")
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def sent_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


class FakeAuth:
    """In-memory stand-in for SupabaseAuth"""

    def __init__(self, user: AuthUser = TEST_USER, token: str = VALID_TOKEN):
        self.user = user
        self.token = token
        self.sign_in_error: str | None = None
        self.sign_up_error: str | None = None
        self.sign_up_returns_session = True
        self.signed_out: list[str | None] = []
        self.sign_up_calls: list[tuple[str, str, str]] = []

    async def get_user(self, access_token):
        return self.user if access_token == self.token else None

    async def sign_in_with_password(self, email, password):
        if self.sign_in_error:
            raise AuthError(self.sign_in_error)
        return AuthSession(access_token=self.token, user=self.user)

    async def sign_up(self, email, password, redirect_to):
        self.sign_up_calls.append((email, password, redirect_to))
        if self.sign_up_error:
            raise AuthError(self.sign_up_error)
        if not self.sign_up_returns_session:
            return None
        return AuthSession(access_token=self.token, user=self.user)

    async def sign_out(self, access_token):
        self.signed_out.append(access_token)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def repo():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield ChatRepository(build_sessionmaker(engine))
    engine.dispose()


@pytest.fixture
def fake_auth():
    return FakeAuth()
