"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ==========================================================================
    # HTTP
    # ==========================================================================

    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Public base URL used in activation links
    app_url: str = "http://localhost:3000"

    # ==========================================================================
    # Credentials & Sessions
    # ==========================================================================

    # "sha256" keeps stored digests compatible; "pbkdf2_sha256" salts new ones
    password_scheme: str = "sha256"
    pbkdf2_iterations: int = 100_000

    session_token_length: int = 64
    activation_code_length: int = 16

    # ==========================================================================
    # Federated sign-in
    # ==========================================================================

    google_oauth_client_id: str = ""

    # ==========================================================================
    # Mail
    # ==========================================================================

    mail_from: str = "noreply@localhost"

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
