# studybot/main.py

import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from studybot.core.config import Settings, get_settings
from studybot.db.session import build_engine, build_sessionmaker, init_db
from studybot.routes.chat_api import router as chat_api_router
from studybot.routes.pages import router as pages_router
from studybot.services.auth_service import SupabaseAuth
from studybot.services.chat_repo import ChatRepository

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """
    Builds the app and its collaborators once; routes reach them through
    app.state instead of module-level clients.
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stdout,
    )

    engine = build_engine(settings.DATABASE_URL)
    http_client = http_client or httpx.AsyncClient()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables if they don't exist
        init_db(engine)
        logger.info("%s started env=%s", settings.APP_NAME, settings.ENV)
        yield
        await http_client.aclose()
        engine.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.http_client = http_client
    app.state.repo = ChatRepository(build_sessionmaker(engine))
    app.state.auth = SupabaseAuth(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY, http_client)
    app.state.engine = engine

    app.include_router(chat_api_router)
    app.include_router(pages_router)

    @app.get("/health")
    def health():
        return {"ok": True, "app": settings.APP_NAME, "env": settings.ENV}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
