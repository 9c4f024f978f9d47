from sqlalchemy.orm import Session, sessionmaker

from studybot.core.errors import ConversationNotFound
from studybot.db.models import Chat, utcnow
from studybot.services.chat_models import Message


def get_chat(db: Session, user_id: str) -> Chat:
    chat = db.query(Chat).filter(Chat.user_id == user_id).first()
    if chat is None:
        raise ConversationNotFound()
    return chat


def upsert_chat(db: Session, user_id: str, messages: list[dict]) -> Chat:
    # full replacement keyed by user_id, never a partial append
    chat = db.merge(Chat(user_id=user_id, messages=list(messages), updated_at=utcnow()))
    db.commit()
    db.refresh(chat)
    return chat


def delete_chat(db: Session, user_id: str) -> int:
    deleted = db.query(Chat).filter(Chat.user_id == user_id).delete()
    db.commit()
    return deleted


class ChatRepository:
    """Stores one conversation per user; built once per app and injected."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def load_messages(self, user_id: str) -> list[Message]:
        """
        Returns the stored turns oldest -> newest.
        Raises ConversationNotFound when the user has no row yet.
        """
        with self._session_factory() as db:
            chat = get_chat(db, user_id)
            return [Message.from_dict(m) for m in (chat.messages or [])]

    def save_messages(self, user_id: str, messages: list[Message]) -> None:
        with self._session_factory() as db:
            upsert_chat(db, user_id, [m.to_dict() for m in messages])

    def delete_messages(self, user_id: str) -> None:
        with self._session_factory() as db:
            delete_chat(db, user_id)
