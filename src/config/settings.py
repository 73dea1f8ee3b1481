"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock modes enable local development without external services.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "EduVerse API"
    api_version: str = "v1"

    # Supabase Configuration (auth, profiles, public storage)
    supabase_url: Optional[str] = Field(
        default=None,
        description="Public Supabase project URL. Storage paths resolve against it."
    )
    supabase_anon_key: str = Field(
        default="",
        description="Anonymous API key sent as the apikey header."
    )
    supabase_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for auth and profile lookups."
    )
    supabase_mock_mode: bool = Field(
        default=False,
        description="Use in-memory auth and profiles instead of Supabase."
    )
    session_cookie_name: str = Field(
        default="sb-access-token",
        description="Cookie carrying the user's access token."
    )

    # MongoDB Configuration
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string"
    )
    mongodb_database: str = Field(
        default="eduverse",
        description="MongoDB database holding courses and videos"
    )
    mongodb_mock_mode: bool = Field(
        default=False,
        description="Use in-memory documents instead of MongoDB."
    )

    # Realtime
    realtime_mock_mode: bool = Field(
        default=False,
        description="Skip the Socket.IO server. Useful for tests."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode settings.

        Returns list of missing required fields. A missing SUPABASE_URL only
        degrades storage URL resolution, but auth cannot work without it.
        """
        missing = []

        if not self.supabase_mock_mode:
            if not self.supabase_url:
                missing.append("SUPABASE_URL")
            if not self.supabase_anon_key:
                missing.append("SUPABASE_ANON_KEY")

        if not self.mongodb_mock_mode and not self.mongodb_uri:
            missing.append("MONGODB_URI")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() to reset.
    """
    return Settings()
