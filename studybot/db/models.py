from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from studybot.db.base import Base


def utcnow():
    return datetime.now(timezone.utc)


class Chat(Base):
    """One row per user holding the whole conversation."""

    __tablename__ = "chats"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    messages: Mapped[list[dict]] = mapped_column(JSON, default=list)  # [{"role": "user"|"ai", "content": "..."}]
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
