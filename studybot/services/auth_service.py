"""
Client for the hosted auth service (Supabase GoTrue REST API).

Only the four operations the views need are wrapped. Errors from the service
are raised as AuthError carrying the service's own message text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from studybot.core.errors import AuthError

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    id: str
    email: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict) -> "AuthUser":
        return cls(id=str(data["id"]), email=data.get("email"))


@dataclass
class AuthSession:
    access_token: str
    user: AuthUser
    refresh_token: Optional[str] = None


def _error_message(resp: httpx.Response) -> str:
    try:
        data: Any = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("msg", "error_description", "message", "error"):
            if data.get(key):
                return str(data[key])
    return AuthError.default_message


def _parse_session(data: Any) -> AuthSession:
    try:
        return AuthSession(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            user=AuthUser.from_payload(data["user"]),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise AuthError(f"Unexpected auth response: missing {e}") from e


class SupabaseAuth:
    def __init__(self, url: Optional[str], anon_key: Optional[str], http_client: httpx.AsyncClient):
        self.url = (url or "").rstrip("/")
        self.anon_key = anon_key
        self.http = http_client

    def _headers(self, access_token: Optional[str] = None) -> dict[str, str]:
        if not self.url or not self.anon_key:
            raise AuthError("Auth service not configured")
        headers = {"apikey": self.anon_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _request(self, method: str, path: str, access_token: Optional[str] = None, **kwargs) -> Any:
        """
        Sends one request and returns the decoded JSON body (None when empty).
        Transport failures, error statuses and unreadable bodies all raise AuthError.
        """
        headers = self._headers(access_token)
        try:
            resp = await self.http.request(method, f"{self.url}{path}", headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Auth service unreachable path=%s: %s", path, e)
            raise AuthError(f"Auth service unavailable: {e}") from e

        if not resp.is_success:
            raise AuthError(_error_message(resp))
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise AuthError("Unexpected auth response") from e

    async def get_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        """Returns None for a missing, expired or rejected token, or when the service can't answer."""
        if not access_token:
            return None
        try:
            data = await self._request("GET", "/auth/v1/user", access_token)
            return AuthUser.from_payload(data)
        except AuthError as e:
            logger.info("No current user: %s", e.message)
        except (KeyError, TypeError, AttributeError) as e:
            logger.info("No current user, malformed payload: %s", e)
        return None

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        data = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return _parse_session(data)

    async def sign_up(self, email: str, password: str, redirect_to: str) -> Optional[AuthSession]:
        """
        Returns a session when the project auto-confirms sign-ups, None when
        the user must first follow the confirmation email to `redirect_to`.
        """
        data = await self._request(
            "POST",
            "/auth/v1/signup",
            params={"redirect_to": redirect_to},
            json={"email": email, "password": password},
        )
        if not isinstance(data, dict) or not data.get("access_token"):
            return None
        return _parse_session(data)

    async def sign_out(self, access_token: Optional[str]) -> None:
        if not access_token:
            return
        await self._request("POST", "/auth/v1/logout", access_token)
