"""
Chat data models: conversation turns and the chat view's session states.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union

USER_ROLE = "user"
AI_ROLE = "ai"


@dataclass
class Message:
    """One conversation turn"""
    role: str  # "user" | "ai"
    content: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(role=str(data["role"]), content=str(data["content"]))

    @property
    def is_user(self) -> bool:
        return self.role == USER_ROLE


@dataclass(frozen=True)
class LoadingSession:
    """Identity and stored conversation not resolved yet"""


@dataclass(frozen=True)
class RedirectToLogin:
    """No authenticated identity; the view sends the browser to /login"""


@dataclass(frozen=True)
class Idle:
    notice: Optional[str] = None


@dataclass(frozen=True)
class Sending:
    """A relay call is in flight"""


@dataclass(frozen=True)
class ErrorShown:
    message: str


SessionState = Union[LoadingSession, RedirectToLogin, Idle, Sending, ErrorShown]
