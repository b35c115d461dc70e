# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - ANALYTICS_CACHE_TTL_SECONDS (report cache lifetime, 0 disables it)
      - ANALYTICS_CACHE_MAX_ENTRIES
      - ANALYTICS_TOP_PRODUCTS_LIMIT
      - CORS_ORIGINS (JSON list)
    """

    PROJECT_NAME: str = "Storefront Analytics API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Analytics report settings
    ANALYTICS_CACHE_TTL_SECONDS: int = 300
    ANALYTICS_CACHE_MAX_ENTRIES: int = 64
    ANALYTICS_TOP_PRODUCTS_LIMIT: int = 5

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
