from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from studybot.db.base import Base

# registers the tables on Base.metadata
from studybot.db import models  # noqa: F401


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            # a single shared connection, otherwise each session sees an empty db
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


def build_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all database tables"""
    Base.metadata.create_all(bind=engine)
