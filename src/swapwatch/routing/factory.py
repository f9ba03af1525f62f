"""Factory for competitor adapters and the comparison aggregator."""

import logging
from typing import Optional

import httpx

from swapwatch.config import Settings, get_settings
from swapwatch.routing.base import ComparisonAggregator, ProviderAdapter
from swapwatch.routing.chainflip import ChainflipAdapter
from swapwatch.routing.relay import RelayAdapter
from swapwatch.routing.thorswap import ThorSwapAdapter

logger = logging.getLogger(__name__)


def create_chainflip_adapter(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ProviderAdapter:
    """Create Chainflip adapter."""
    settings = settings or get_settings()
    return ChainflipAdapter(
        api_url=settings.chainflip_api_url,
        timeout=settings.provider_timeout_seconds,
        client=client,
    )


def create_thorswap_adapter(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ProviderAdapter:
    """Create THORSwap adapter.

    Works without an API key, at lower rate limits.
    """
    settings = settings or get_settings()
    if not settings.thorswap_api_key:
        logger.debug("THORSWAP_API_KEY not set - using anonymous THORSwap access")
    return ThorSwapAdapter(
        api_url=settings.thorswap_api_url,
        api_key=settings.thorswap_api_key,
        timeout=settings.provider_timeout_seconds,
        client=client,
    )


def create_relay_adapter(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ProviderAdapter:
    """Create Relay adapter."""
    settings = settings or get_settings()
    return RelayAdapter(
        api_url=settings.relay_api_url,
        btc_address=settings.btc_quote_address,
        timeout=settings.provider_timeout_seconds,
        client=client,
    )


def create_default_aggregator(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ComparisonAggregator:
    """Create the aggregator with all three competitors.

    Order is Chainflip, THORSwap, Relay; it decides ties.

    Args:
        settings: Settings to read endpoints and timeouts from
        client: Optional shared HTTP client for all adapters

    Returns:
        Configured ComparisonAggregator
    """
    settings = settings or get_settings()
    aggregator = ComparisonAggregator(timeout=settings.provider_timeout_seconds)

    for adapter in (
        create_chainflip_adapter(settings, client),
        create_thorswap_adapter(settings, client),
        create_relay_adapter(settings, client),
    ):
        aggregator.add_adapter(adapter)
        logger.debug(f"Added {adapter.name} adapter")

    return aggregator
