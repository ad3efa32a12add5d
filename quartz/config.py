"""
Centralized Configuration Settings.

All environment variables are defined here using Pydantic Settings.
Provider credentials default to empty strings so the app can boot (and serve
cached content) without every provider configured.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable loading.

    All settings have sensible defaults for development.
    Production deployments should override via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================
    ENVIRONMENT: str = "production"
    DEBUG: bool = False
    STRUCTURED_LOGGING: bool = True
    LOG_LEVEL: str = "INFO"
    SERVICE_NAME: str = "quartz"
    SITE_URL: str = "https://tryquartz.wiki"

    @property
    def is_development(self) -> bool:
        """Development mode skips server-side usage limits."""
        return self.ENVIRONMENT.lower() in ("development", "dev")

    # =========================================================================
    # CORS & Origins
    # =========================================================================
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse ALLOWED_ORIGINS into list."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    # =========================================================================
    # Language Model (OpenAI)
    # =========================================================================
    OPENAI_API_KEY: str = ""
    AI_MODEL: str = "gpt-5.2"
    AI_REASONING_EFFORT: str = "none"
    OPENAI_TIMEOUT_SECONDS: float = 60.0

    @property
    def model_version(self) -> str:
        """Cache partition key; changes whenever the model is upgraded."""
        return self.AI_MODEL

    # =========================================================================
    # Text-to-Speech
    # =========================================================================
    TTS_PROVIDER: str = "openai"  # openai | elevenlabs
    ELEVENLABS_API_KEY: str = ""
    ELEVENLABS_API_URL: str = "https://api.elevenlabs.io/v1"

    # =========================================================================
    # Supabase (auth, cache tables, audio storage)
    # =========================================================================
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    AUDIO_BUCKET: str = "quartz-audio"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and (self.SUPABASE_SERVICE_ROLE_KEY or self.SUPABASE_ANON_KEY))

    # =========================================================================
    # Stripe
    # =========================================================================
    STRIPE_SECRET_KEY: str = ""
    STRIPE_PRICE_ID: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""

    # =========================================================================
    # Hot Cache (Redis)
    # =========================================================================
    REDIS_ENABLED: bool = True
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    # =========================================================================
    # Content Cache & Usage Limits
    # =========================================================================
    CACHE_TTL_DAYS: int = 30
    FREE_DAILY_LIMIT: int = 3
    ANON_DAILY_LIMIT: int = 3
    LOGGED_IN_DAILY_LIMIT: int = 10

    @property
    def cache_ttl_seconds(self) -> int:
        return self.CACHE_TTL_DAYS * 24 * 60 * 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings loaded from environment.
    """
    return Settings()
