"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE (SKU CATALOG)
    # ===================
    supabase_url: Optional[str] = Field(
        None,
        description="Supabase project URL"
    )
    supabase_key: Optional[str] = Field(
        None,
        description="Supabase anon/public key"
    )
    sku_catalog_table: str = Field(
        default="skus",
        min_length=1,
        description="Table holding the organization's registered SKUs"
    )

    # ===================
    # SHOP API (SUBMISSION)
    # ===================
    shop_api_url: Optional[str] = Field(
        None,
        description="Shop-creation endpoint receiving the assembled payload"
    )
    shop_api_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="HTTP timeout for the shop-creation call"
    )

    # ===================
    # FILE IMPORT
    # ===================
    csv_delimiter: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="Delimiter for .csv uploads"
    )
    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1024,
        le=100 * 1024 * 1024,
        description="Largest accepted planogram upload"
    )
    facings_max: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Highest facings count accepted per SKU"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def catalog_configured(self) -> bool:
        """Check if the Supabase-backed SKU catalog is reachable."""
        return bool(self.supabase_url and self.supabase_key)

    @property
    def shop_api_configured(self) -> bool:
        """Check if the shop-creation endpoint is set."""
        return bool(self.shop_api_url)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
