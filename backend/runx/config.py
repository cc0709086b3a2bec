"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Secrets (STRIPE_SECRET_KEY, DATABASE_URL credentials) only come from the
      environment or .env
    - get_settings() is cached: one Settings instance per process
    - Out-of-range tuning values fail at startup, not mid-request

Design Decisions:
    - ORDER_PLACEMENT_MODE defaults to atomic; legacy reproduces the
      commit-per-stage storefront behavior
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from runx.core.domain_types import PlacementMode


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Store
    database_url: str = "postgresql+asyncpg://runx:runx@db:5432/runx"
    database_pool_size: int = Field(10, ge=1)
    database_max_overflow: int = Field(10, ge=0)
    # Upper bound for each order placement stage
    database_timeout_seconds: float = Field(5.0, gt=0)

    order_placement_mode: PlacementMode = PlacementMode.ATOMIC

    # Credentials and second factor
    bcrypt_rounds: int = Field(10, ge=4, le=31)
    twofa_issuer: str = "RunX"
    totp_valid_window: int = Field(1, ge=0)

    # Payments
    stripe_secret_key: str = "sk_test_placeholder"
    stripe_timeout_seconds: int = Field(30, gt=0)

    cors_origins: list[str] = ["*"]

    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v):
        """Managed Postgres hands out postgresql:// URLs; the engine needs asyncpg."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return "postgresql+asyncpg://" + v[len("postgresql://"):]
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
