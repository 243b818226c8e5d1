# backend/app/core/config_loader.py

from typing import Annotated, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    OPENAI_API_KEY: str = ""
    UNSPLASH_ACCESS_KEY: str = ""
    GOOGLE_MAPS_API_KEY: str = ""
    JWT_SECRET_KEY: str = "supersecret"
    DB_PATH: str = "data.sqlite3"
    CLIENT_URL: str = "http://localhost:3000"

    # Tried in order, first parseable answer wins
    AI_MODELS: Annotated[List[str], NoDecode] = ["gpt-4.1-mini", "gpt-4o-mini", "gpt-4.1-nano"]
    AI_TEMPERATURE: float = 0.7
    AI_DEBUG_ERRORS: bool = False
    AUTO_SAVE_GENERATED: bool = False

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    general_rate_limit: str = "100 per 15 minutes"
    ai_rate_limit: str = "10 per 15 minutes"
    auth_rate_limit: str = "5 per minute"

    image_cache_seconds: int = 60 * 60
    country_cache_seconds: int = 24 * 60 * 60
    http_timeout_seconds: float = 15.0

    access_token_expire_minutes: int = 7 * 24 * 60
    environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("AI_MODELS", mode="before")
    @classmethod
    def _split_models(cls, value):
        # AI_MODELS=gpt-4.1-mini,gpt-4o-mini
        if isinstance(value, str) and not value.strip().startswith("["):
            return [m.strip() for m in value.split(",") if m.strip()]
        return value


settings = Settings()
