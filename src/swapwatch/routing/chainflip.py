"""Chainflip quote adapter.

Chainflip quotes only amounts, so the USD fee is derived from the
settlement-time prices carried on the asset descriptors.
"""

import logging
from decimal import Decimal
from typing import Optional

import httpx

from swapwatch.catalog import Asset, to_minor_units, to_real_quantity
from swapwatch.routing.base import (
    DEFAULT_PROVIDER_TIMEOUT,
    QUOTE_ERRORS,
    ComparisonMetric,
    ProviderAdapter,
)
from swapwatch.routing.mappings import SwapPlatform

logger = logging.getLogger(__name__)

CHAINFLIP_API_URL = "https://chainflip-swap.chainflip.io"


def _pick_quote(quotes: list[dict]) -> dict:
    """Prefer the regular (non-DCA) quote."""
    for quote in quotes:
        if quote.get("type") == "REGULAR":
            return quote
    return quotes[0]


class ChainflipAdapter(ProviderAdapter):
    """Chainflip broker quotes."""

    def __init__(
        self,
        api_url: str = CHAINFLIP_API_URL,
        timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(timeout=timeout, client=client)
        self.api_url = api_url.rstrip("/")

    @property
    def platform(self) -> SwapPlatform:
        return SwapPlatform.CHAINFLIP

    async def quote(self, src: Asset, dst: Asset, amount: Decimal) -> ComparisonMetric:
        pair = self.resolve_pair(src, dst)
        if pair is None:
            return ComparisonMetric.unavailable()
        src_format, dst_format = pair

        if src.price_usd <= 0 or dst.price_usd <= 0:
            logger.warning(f"Chainflip: missing USD price for {src.symbol} or {dst.symbol}")
            return ComparisonMetric.unavailable()

        params = {
            "amount": str(to_minor_units(amount, src.decimals)),
            "srcChain": src_format.chain,
            "srcAsset": src_format.currency,
            "destChain": dst_format.chain,
            "destAsset": dst_format.currency,
        }

        try:
            async with self.http() as client:
                response = await client.get(f"{self.api_url}/v2/quote", params=params)

            if response.status_code != 200:
                logger.warning(f"Chainflip API error: {response.status_code}")
                return ComparisonMetric.unavailable()

            data = response.json()
            logger.debug(f"Chainflip API response: {data}")

            quotes = data if isinstance(data, list) else [data]
            if not quotes:
                logger.warning("Chainflip: no quotes in response")
                return ComparisonMetric.unavailable()

            quote = _pick_quote(quotes)
            egress_amount = to_real_quantity(quote["egressAmount"], dst.decimals)
            time = int(quote.get("estimatedDurationSeconds") or 0)

        except QUOTE_ERRORS as e:
            logger.error(f"Chainflip quote error: {type(e).__name__}: {e}")
            return ComparisonMetric.unavailable()

        fee = amount * src.price_usd - egress_amount * dst.price_usd
        return ComparisonMetric(fee=fee, time=time)
