# app/core/config.py
from functools import lru_cache
from typing import Optional, Tuple
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # JWT signing key has no default: a missing key is a startup error
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 30

    # Cookie names checked (in order) before the Authorization header
    AUTH_COOKIE_NAMES: Tuple[str, ...] = ("token", "auth_token")

    # Password reset tokens
    RESET_TOKEN_EXPIRE_MINUTES: int = 10

    # MongoDB
    MONGODB_URI: str = "mongodb://localhost:27017/community_jobs"
    MONGODB_DB: str = "community_jobs"

    # Pydantic v2 settings: read from .env file, immutable once built
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def validate_settings(settings: Settings) -> None:
    """Fail fast on configuration the process cannot serve requests without."""
    if not settings.JWT_SECRET:
        raise RuntimeError("JWT_SECRET is not set; refusing to start without a token signing key")
