"""
Configuration settings for the dashboard plugins API hub.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SupabaseEndpoint(BaseModel):
    """Connection parameters for one Supabase project."""

    url: str
    key: str

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.key)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Server
    # ========================================
    api_host: str = Field(
        default="0.0.0.0",
        description="Interface the API server binds to",
    )
    port: int = Field(
        default=3000,
        description="Port the API server listens on",
    )
    api_prefix: str = Field(
        default="/api/v1",
        description="Path prefix for the auth and math routers",
    )
    cors_origin: str = Field(
        default="http://localhost:8080",
        description="Allowed CORS origin (the dashboard frontend)",
    )
    environment: str = Field(
        default="development",
        description="Deployment environment name",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum level for the loguru stderr sink",
    )

    # ========================================
    # Access tokens
    # ========================================
    jwt_secret: str = Field(
        default="dev-secret-change-me",
        description="HMAC secret used to sign API access tokens",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )
    jwt_expires_in: str = Field(
        default="24h",
        description=(
            "Access token lifetime ('30m', '24h', '7d'). A bare number is seconds, "
            "not milliseconds as in jsonwebtoken's string form"
        ),
    )

    # ========================================
    # Dashboard Supabase (identity validation)
    # ========================================
    dashboard_supabase_url: str = Field(
        default="",
        description="Dashboard Supabase project URL",
    )
    dashboard_supabase_anon_key: str = Field(
        default="",
        description="Dashboard Supabase anon key",
    )

    # ========================================
    # Math plugin Supabase (plugin dataset)
    # ========================================
    math_supabase_url: str = Field(
        default="",
        description="Math plugin Supabase project URL",
    )
    math_supabase_key: str = Field(
        default="",
        description="Math plugin Supabase service key",
    )

    def get_dashboard_endpoint(self) -> SupabaseEndpoint:
        """Connection parameters for the identity-validation project."""
        return SupabaseEndpoint(
            url=self.dashboard_supabase_url,
            key=self.dashboard_supabase_anon_key,
        )

    def get_math_endpoint(self) -> SupabaseEndpoint:
        """Connection parameters for the math plugin dataset project."""
        return SupabaseEndpoint(
            url=self.math_supabase_url,
            key=self.math_supabase_key,
        )

    def uses_default_secret(self) -> bool:
        return self.jwt_secret == "dev-secret-change-me"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
