# minijwt/config.py
from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Token service configuration, read from environment variables.
    """

    CORS_ORIGINS: list[str] = ["*"]
    ENABLE_DEBUG_ROUTES: bool = False
    JWT_SECRET: SecretStr | None = None
    MAX_PAYLOAD_BYTES: int = 8192
    RATE_LIMIT_REQUESTS: int = 20
    RATE_LIMIT_WINDOW_SECONDS: int = 1
    REDIS_URL: str | None = None
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
