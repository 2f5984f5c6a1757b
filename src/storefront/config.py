"""Application settings.

Storage and event processing are configured by Protean through
``domain.toml`` and ``PROTEAN_ENV``. The knobs below tune the checkout
workflow and the HTTP surface; they load from ``STOREFRONT_*`` environment
variables or a ``.env`` file.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.order.numbering import MAX_PREFIX_LENGTH


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Orders ---
    order_number_prefix: str = Field(default="DTU", min_length=1, max_length=MAX_PREFIX_LENGTH)
    order_number_attempts: int = Field(default=10, ge=1)
    checkout_attempts: int = Field(default=3, ge=1)
    # Allowed gap, in minor units, between client and server totals
    total_tolerance: int = Field(default=1, ge=0)
    currency: str = "INR"

    # --- Stock ---
    stock_decrement_attempts: int = Field(default=3, ge=1)

    # --- Storage ---
    storage_timeout_seconds: float = Field(default=5.0, gt=0)
    slow_operation_seconds: float = Field(default=1.0, gt=0)

    # --- HTTP ---
    auth_header: str = "X-User-Id"
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    cors_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
