"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Services never read the environment themselves: the tunables below are passed
into them explicitly when they are wired together (see backend/dependencies.py).

Usage:
    from backend.settings import get_settings, Settings

    settings = get_settings()
    print(settings.pb_weight_tolerance)

    # Tests
    settings = Settings(environment="test", _env_file=None)
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level used by the CLI",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anonymous key (limited access)",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the best available Supabase key (service role preferred)."""
        return self.supabase_service_role_key or self.supabase_anon_key

    # -------------------------------------------------------------------------
    # Personal Bests
    # -------------------------------------------------------------------------
    pb_weight_tolerance: float = Field(
        default=0.01,
        gt=0,
        description="Absolute tolerance (kg) for grouping sets into a weight bucket",
    )

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------
    unknown_exercise_name: str = Field(
        default="Unknown Exercise",
        min_length=1,
        description="Name used for import rows with a blank exercise title",
    )

    # -------------------------------------------------------------------------
    # Goals and Forecasts
    # -------------------------------------------------------------------------
    streak_lookback_periods: int = Field(
        default=30,
        ge=1,
        description="How many goal periods are walked when counting a streak",
    )
    forecast_window: int = Field(
        default=7,
        ge=1,
        description="Moving-average window size",
    )
    forecast_alpha: float = Field(
        default=0.3,
        gt=0,
        lt=1,
        description="Exponential smoothing decay, open interval (0, 1)",
    )
    forecast_band_k: float = Field(
        default=1.0,
        ge=0,
        description="Band half-width in residual standard deviations",
    )
    forecast_horizon_days: int = Field(
        default=14,
        ge=0,
        description="Default number of future days to forecast",
    )
    forecast_lookback_days: int = Field(
        default=60,
        ge=1,
        description="Days of activity history used as the forecast baseline",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is one the logging module knows."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level '{v}'")
        return level

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
