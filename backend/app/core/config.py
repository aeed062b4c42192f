from enum import Enum

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModeEnum(str, Enum):
    development = "development"
    production = "production"
    testing = "testing"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── App ───────────────────────────────────────────────────
    MODE: ModeEnum = ModeEnum.development
    PROJECT_NAME: str = "Chat Core"
    LOG_LEVEL: str = "INFO"

    # ── Message Store API ─────────────────────────────────────
    API_BASE_URL: str = "http://localhost:3000"
    API_PREFIX: str = "/api"
    HTTP_TIMEOUT_SECONDS: float = 60.0

    # ── Chats ─────────────────────────────────────────────────
    DEFAULT_CHAT_TITLE: str = "New Chat"
    TITLE_MAX_WORDS: int = 6

    # ── Stub completer ────────────────────────────────────────
    STREAM_CHUNK_DELAY_SECONDS: float = 0.0

    @field_validator("API_PREFIX", mode="before")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        # "/api/", "api" and "/api" all mean the same mount point
        v = (v or "").strip().strip("/")
        return f"/{v}" if v else ""

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return str(v).upper()


settings = Settings()
