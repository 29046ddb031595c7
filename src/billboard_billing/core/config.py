"""Application configuration using Pydantic Settings."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Billing engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BILLING_",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    # Reference data
    reference_data_path: Optional[str] = Field(
        default=None,
        description="YAML file with static pricing and status sets. Defaults to the packaged file.",
    )

    # Pricing
    pricing_cache_ttl_seconds: int = 300
    default_operating_fee_rate: Decimal = Decimal("3")

    # Collections
    top_overdue_limit: int = 5
    unknown_customer_name: str = "غير معروف"
    default_installment_description: str = "دفعة"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the log level name."""
        return v.strip().upper() or "INFO"

    @field_validator("pricing_cache_ttl_seconds", "top_overdue_limit")
    @classmethod
    def non_negative(cls, v: int) -> int:
        """Reject negative counters."""
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
