"""Application configuration using pydantic-settings.

Covers the Garden feed endpoints, the selection threshold and the three
competitor quote APIs used for fee/time comparison.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Garden feed
    # ======================
    network_api_url: str = Field(
        default="https://api.garden.finance/info/assets",
        description="Network/asset catalog endpoint",
    )
    orders_api_url: str = Field(
        default="https://api.garden.finance/orders",
        description="Base URL of the matched orders feed",
    )
    feed_timeout_seconds: float = Field(default=30.0, description="Feed request timeout")
    page_size: int = Field(default=1, ge=1, description="Matched orders per feed page")
    page_number: int = Field(default=1, ge=1, description="Feed page to poll")

    # ======================
    # Selection
    # ======================
    volume_threshold: Decimal = Field(
        default=Decimal("300"), ge=0, description="Minimum swap volume in USD"
    )
    polling_interval_seconds: int = Field(default=10, ge=1, description="Seconds between polls")
    orders_per_poll: int = Field(default=5, ge=1, description="Max outcomes published per poll")

    # ======================
    # Competitor quote APIs
    # ======================
    provider_timeout_seconds: float = Field(
        default=10.0, description="Upper bound for a single competitor quote"
    )
    relay_api_url: str = Field(
        default="https://api.relay.link/quote", description="Relay quote endpoint"
    )
    thorswap_api_url: str = Field(
        default="https://api.thorswap.net/router/quote", description="THORSwap quote endpoint"
    )
    thorswap_api_key: Optional[str] = Field(default=None, description="THORSwap API key")
    chainflip_api_url: str = Field(
        default="https://chainflip-swap.chainflip.io", description="Chainflip backend URL"
    )
    btc_quote_address: str = Field(
        default="bc1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh",
        description="Bitcoin placeholder address used for Relay quotes",
    )

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "feed": {
                "network_api_url": self.network_api_url,
                "orders_api_url": self.orders_api_url,
                "page_size": self.page_size,
                "page_number": self.page_number,
            },
            "selection": {
                "volume_threshold": str(self.volume_threshold),
                "polling_interval_seconds": self.polling_interval_seconds,
                "orders_per_poll": self.orders_per_poll,
            },
            "providers": {
                "timeout_seconds": self.provider_timeout_seconds,
                "relay": self.relay_api_url,
                "thorswap": self.thorswap_api_url,
                "thorswap_api_key": "***" if self.thorswap_api_key else "(not set)",
                "chainflip": self.chainflip_api_url,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
