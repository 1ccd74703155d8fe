"""
Application configuration using Pydantic Settings.
Loads from environment variables with sensible defaults.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Repurpose Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # API
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]
    dashboard_path: str = "/dashboard"

    # Database - Individual settings (recommended)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_database: str = "repurpose"
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    database_url_override: Optional[str] = None  # Full URL, e.g. sqlite+aiosqlite:///./local.db

    # Database pool settings
    database_pool_size: int = 20
    database_max_overflow: int = 10

    @property
    def database_url(self) -> str:
        """Build database URL from individual components."""
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_database}"

    # Upstream inference (Groq, OpenAI-compatible API)
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"

    # Model identifiers per tier
    model_fast_text: str = "llama-3.1-8b-instant"
    model_powerful_text: str = "llama-3.3-70b-versatile"
    model_reasoning_text: str = "gpt-oss-120b"
    model_vision_single: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    model_vision_multimodal: str = "meta-llama/llama-4-maverick-17b-128e-instruct"
    model_compound: str = "groq-compound"

    # LLM Settings
    llm_temperature: float = 0.7
    llm_max_tokens: int = 4000

    # Firebase (ID token verification)
    firebase_project_id: str = ""
    firebase_client_email: str = ""
    firebase_private_key: str = ""  # Escaped newlines (\n) are expanded at load time
    firebase_allowed_uid: str = ""  # Restrict access to a single account when set

    # LinkedIn OAuth
    linkedin_client_id: str = ""
    linkedin_client_secret: str = ""
    public_base_url: str = "http://localhost:3000"

    @property
    def linkedin_redirect_uri(self) -> str:
        """OAuth callback URL registered with the LinkedIn app."""
        return f"{self.public_base_url.rstrip('/')}{self.api_prefix}/auth/linkedin/callback"

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "console"

    # Sentry (Error Tracking)
    sentry_dsn: str = ""
    sentry_environment: str = "development"
    sentry_traces_sample_rate: float = 0.1

    # Dev override: when skip_auth is true, every request runs as dev_user_id
    skip_auth: bool = False
    dev_user_id: str = "dev-user-001"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
