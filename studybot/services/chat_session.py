from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from starlette.concurrency import run_in_threadpool

from studybot.core.errors import AuthError, ConversationNotFound
from studybot.services.auth_service import AuthUser, SupabaseAuth
from studybot.services.chat_models import (
    AI_ROLE,
    USER_ROLE,
    ErrorShown,
    Idle,
    LoadingSession,
    Message,
    RedirectToLogin,
    Sending,
    SessionState,
)
from studybot.services.chat_repo import ChatRepository

logger = logging.getLogger(__name__)

# message -> {"reply": ...} or {"error": ...}
RelayFn = Callable[[str], Awaitable[dict]]

RELAY_FAILED_TEXT = "Failed to get AI response"
SAVED_NOTICE = "Chat saved!"


class ChatSession:
    """
    The chat view's state for one browser session.

    load() must run first; it resolves the identity and the stored
    conversation. Every other action acts on the loaded user.
    """

    def __init__(
        self,
        auth: SupabaseAuth,
        repo: ChatRepository,
        relay: RelayFn,
        access_token: Optional[str],
    ):
        self.auth = auth
        self.repo = repo
        self.relay = relay
        self.access_token = access_token
        self.user: Optional[AuthUser] = None
        self.messages: list[Message] = []
        self.state: SessionState = LoadingSession()

    @property
    def needs_login(self) -> bool:
        return isinstance(self.state, RedirectToLogin)

    @property
    def is_sending(self) -> bool:
        return isinstance(self.state, Sending)

    @property
    def error(self) -> Optional[str]:
        return self.state.message if isinstance(self.state, ErrorShown) else None

    @property
    def notice(self) -> Optional[str]:
        return self.state.notice if isinstance(self.state, Idle) else None

    def _require_user(self) -> AuthUser:
        if self.user is None:
            raise RuntimeError(f"chat session has no user (state={self.state!r})")
        return self.user

    async def load(self) -> SessionState:
        self.state = LoadingSession()
        self.user = await self.auth.get_user(self.access_token)
        if self.user is None:
            self.state = RedirectToLogin()
            return self.state

        try:
            self.messages = await run_in_threadpool(self.repo.load_messages, self.user.id)
            self.state = Idle()
        except ConversationNotFound:
            self.messages = []
            self.state = Idle()
        except Exception as e:
            logger.warning("Loading chat failed for user=%s: %s", self.user.id, e)
            self.messages = []
            self.state = ErrorShown(f"Failed to load chat: {e}")
        return self.state

    async def send(self, text: str) -> SessionState:
        self._require_user()
        if not (text or "").strip():
            return self.state

        self.messages = [*self.messages, Message(role=USER_ROLE, content=text)]
        self.state = Sending()

        try:
            data = await self.relay(text)
        except Exception:
            logger.exception("Relay call failed")
            self.state = ErrorShown(RELAY_FAILED_TEXT)
            return self.state

        if data.get("error"):
            self.state = ErrorShown(str(data["error"]))
            return self.state

        self.messages = [*self.messages, Message(role=AI_ROLE, content=data.get("reply", ""))]
        self.state = Idle()
        return await self._persist()

    async def save(self) -> SessionState:
        self._require_user()
        self.state = await self._persist()
        if isinstance(self.state, Idle):
            self.state = Idle(notice=SAVED_NOTICE)
        return self.state

    async def reset(self) -> SessionState:
        user = self._require_user()
        self.messages = []
        self.state = Idle()
        try:
            await run_in_threadpool(self.repo.delete_messages, user.id)
        except Exception as e:
            logger.warning("Reset failed for user=%s: %s", user.id, e)
            self.state = ErrorShown(f"Failed to reset chat: {e}")
        return self.state

    async def logout(self) -> SessionState:
        try:
            await self.auth.sign_out(self.access_token)
        except AuthError as e:
            # the local session is dropped either way
            logger.info("Sign-out rejected by auth service: %s", e.message)
        self.user = None
        self.messages = []
        self.state = RedirectToLogin()
        return self.state

    async def _persist(self) -> SessionState:
        user = self._require_user()
        try:
            await run_in_threadpool(self.repo.save_messages, user.id, list(self.messages))
        except Exception as e:
            logger.warning("Saving chat failed for user=%s: %s", user.id, e)
            self.state = ErrorShown(f"Failed to save chat: {e}")
            return self.state
        self.state = Idle()
        return self.state
