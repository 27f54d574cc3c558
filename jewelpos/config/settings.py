"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "jewelpos.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]

    # Header carrying the authenticated actor id, set by the auth proxy
    actor_header: str = "X-Actor-Id"


class InventorySettings(BaseSettings):
    """Stock policy configuration."""

    model_config = SettingsConfigDict(env_prefix="INVENTORY_")

    allow_negative_stock: bool = False
    low_stock_alerts: bool = True


class SalesSettings(BaseSettings):
    """Sale and memo document configuration."""

    model_config = SettingsConfigDict(env_prefix="SALES_")

    invoice_prefix: str = "INV"
    memo_prefix: str = "MEM"
    memo_default_days: int = 15
    memo_due_soon_days: int = 3
    require_customer_for_memo: bool = True
    default_payment_method: str = "cash"
    invoice_number_attempts: int = 3
    money_places: int = 2


class NotificationSettings(BaseSettings):
    """Customer and staff notification configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    enabled: bool = True
    shop_name: str = "Jewellery100"
    currency_symbol: str = "₹"

    # When set, notifications are POSTed here instead of only being logged
    webhook_url: str | None = None
    timeout: int = 10
    max_retries: int = 2

    # Phone numbers that receive low stock alerts
    admin_recipients: list[str] = []


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "JewelPOS"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)
    sales: SalesSettings = Field(default_factory=SalesSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
