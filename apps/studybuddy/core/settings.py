from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Unified application settings for the study relay.

    Loads from env with support for repo ".env" files. Avoids manual load_dotenv().
    """

    _app_env = (os.getenv("APP_ENV") or "").strip().lower()
    _env_files = (
        []
        if _app_env in {"test", "ci"}
        else [
            str((Path(__file__).resolve().parents[1] / ".env")),  # apps/studybuddy/.env
            str((Path(__file__).resolve().parents[3] / ".env")),  # repo root .env
        ]
    )

    model_config = SettingsConfigDict(
        env_file=_env_files,
        case_sensitive=False,
        extra="ignore",
    )

    # --- App / Core ---
    app_env: str = Field(default="dev", alias="APP_ENV")
    app_name: str = Field(default="studybuddy", alias="APP_NAME")
    # Logging
    log_level: str | None = Field(default=None, alias="STUDYBUDDY_LOG_LEVEL")
    log_level_fallback: str | None = Field(default=None, alias="LOG_LEVEL")

    cors_allow_origins: list[str] = Field(default=["*"], alias="CORS_ALLOW_ORIGINS")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3001, alias="PORT")

    # --- LLM runtime (Ollama) ---
    ollama_base_url: str = Field(
        default="http://localhost:11434/api", alias="STUDYBUDDY_OLLAMA_BASE_URL"
    )
    ollama_chat_model: str = Field(default="qwen2.5:1.5b", alias="STUDYBUDDY_OLLAMA_CHAT_MODEL")
    llm_temperature: float = Field(default=0.7, alias="STUDYBUDDY_LLM_TEMPERATURE")
    llm_top_p: float = Field(default=0.9, alias="STUDYBUDDY_LLM_TOP_P")
    chat_num_predict: int = Field(default=512, alias="STUDYBUDDY_CHAT_NUM_PREDICT", ge=1)
    quiz_json_format: bool = Field(default=True, alias="STUDYBUDDY_QUIZ_JSON_FORMAT")
    llm_timeout_seconds: float | None = Field(
        default=None,
        alias="STUDYBUDDY_LLM_TIMEOUT_SECONDS",
        description="None waits for the runtime indefinitely.",
    )

    # --- Caller-side relay client ---
    relay_base_url: str = Field(default="http://localhost:3001", alias="STUDYBUDDY_RELAY_URL")
    relay_timeout_seconds: float | None = Field(default=None, alias="STUDYBUDDY_RELAY_TIMEOUT_SECONDS")

    # --- Study plan email ---
    smtp_host: str | None = Field(default=None, alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_username: str | None = Field(default=None, alias="SMTP_USERNAME")
    smtp_password: SecretStr | None = Field(default=None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    smtp_from_email: Optional[str] = Field(default=None, alias="SMTP_FROM_EMAIL")
    smtp_from_name: str = Field(default="LearningBuddyAI", alias="SMTP_FROM_NAME")


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
