from __future__ import annotations

from typing import Literal

from pydantic import AnyUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_SERVICE_ROLE_KEY: str
    GEMINI_API_KEY: SecretStr = SecretStr("")
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GENERATION_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)
    DATABASE_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    # "memory" keeps recipes in process, handy for local runs without Supabase
    RECIPES_BACKEND: Literal["supabase", "memory"] = "supabase"
    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:4321", "http://localhost:5173"],
    )


settings = Settings()
