# briteverify/config.py - Pydantic settings (env vars)

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

V1_API_BASE_URL = "https://bpi.briteverify.com/api/v1"
V3_API_BASE_URL = "https://bulk-api.briteverify.com/api/v3"


class Settings(BaseSettings):
    # Auth
    api_key: str | None = None

    # Endpoints (real-time v1, bulk v3)
    v1_base_url: str = V1_API_BASE_URL
    v3_base_url: str = V3_API_BASE_URL

    # Transport
    timeout_seconds: float = 30.0
    connect_timeout_seconds: float = 10.0
    user_agent: str | None = None

    # Rate limiting (HTTP 429)
    retry_enabled: bool = True
    default_retry_after_seconds: int = 60

    model_config = SettingsConfigDict(
        env_prefix="BRITEVERIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("api_key")
    @classmethod
    def _clean_api_key(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("v1_base_url", "v3_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
