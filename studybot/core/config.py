from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "StudyBot"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'studybot.db'}"

    # Server-side secret; the relay refuses to run without it.
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"

    # Public URL + anon key pair of the hosted auth service.
    SUPABASE_URL: str | None = None
    SUPABASE_ANON_KEY: str | None = None

    SITE_URL: str = "http://localhost:8000"
    SESSION_COOKIE_NAME: str = "studybot_access_token"
    COOKIE_SECURE: bool = False

    @property
    def signup_redirect_url(self) -> str:
        return self.SITE_URL.rstrip("/") + "/chat"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
