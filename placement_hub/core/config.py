"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "placement_user"
    postgres_password: str = "password"
    postgres_db: str = "placement_hub"

    # Full SQLAlchemy URL, overrides the postgres_* fields when set
    database_url: Optional[str] = None

    # AI gateway (OpenAI-compatible chat completions)
    ai_gateway_api_key: str = ""
    ai_gateway_base_url: str = "https://ai.gateway.lovable.dev/v1"
    ai_model: str = "google/gemini-2.5-flash"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Matching
    gpa_scale: float = 4.0
    recommendation_fallback_limit: int = 5

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or self.postgres_url

    @property
    def ai_configured(self) -> bool:
        return bool(self.ai_gateway_api_key)

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
