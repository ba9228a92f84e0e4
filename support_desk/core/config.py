# support_desk/core/config.py
from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # Hosted Redis REST endpoint; both are required
    UPSTASH_REDIS_REST_URL: str = Field(..., min_length=1)
    UPSTASH_REDIS_REST_TOKEN: str = Field(..., min_length=1)
    STORE_TIMEOUT: float = Field(default=10.0, gt=0)

    APP_NAME: str = "Support Desk API"
    APP_DESC: str = "Support ticket tracker backed by a hosted Redis store"
    APP_VERSION: str = "1.0.0"

    # CORS origins, comma separated
    CORS_ORIGINS: str | None = None

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_JSON: bool = False

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        if not self.CORS_ORIGINS:
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
