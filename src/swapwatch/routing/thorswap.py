"""THORSwap aggregator quote adapter.

THORSwap returns several routes per request (THORChain, Maya, ...);
the route with the highest expected output is used for comparison.
"""

import logging
from decimal import Decimal
from typing import Optional

import httpx

from swapwatch.catalog import Asset
from swapwatch.routing.base import (
    DEFAULT_PROVIDER_TIMEOUT,
    QUOTE_ERRORS,
    ComparisonMetric,
    ProviderAdapter,
)
from swapwatch.routing.mappings import SwapPlatform

logger = logging.getLogger(__name__)

THORSWAP_QUOTE_URL = "https://api.thorswap.net/router/quote"


def _best_route(routes: list[dict]) -> dict:
    """Pick the route with the highest expected buy amount (first wins ties)."""
    best = routes[0]
    for route in routes[1:]:
        if Decimal(str(route["expectedBuyAmount"])) > Decimal(str(best["expectedBuyAmount"])):
            best = route
    return best


def _asset_price(route: dict, identifier: str) -> Decimal:
    for asset in (route.get("meta") or {}).get("assets") or []:
        if str(asset.get("asset", "")).upper() == identifier.upper():
            return Decimal(str(asset.get("price") or 0))
    return Decimal("0")


class ThorSwapAdapter(ProviderAdapter):
    """THORSwap quotes, valued with the per-asset prices in route metadata."""

    def __init__(
        self,
        api_url: str = THORSWAP_QUOTE_URL,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(timeout=timeout, client=client)
        self.api_url = api_url
        self.api_key = api_key

    @property
    def platform(self) -> SwapPlatform:
        return SwapPlatform.THORSWAP

    def _headers(self) -> dict:
        headers = {"X-Version": "2"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers

    async def quote(self, src: Asset, dst: Asset, amount: Decimal) -> ComparisonMetric:
        pair = self.resolve_pair(src, dst)
        if pair is None:
            return ComparisonMetric.unavailable()
        sell_format, buy_format = pair

        request_body = {
            "sellAsset": sell_format.currency,
            "buyAsset": buy_format.currency,
            "sellAmount": format(amount, "f"),
            "sourceAddress": "",
            "destinationAddress": "",
            "slippage": 3,
            "includeTx": False,
            "cfBoost": False,
            "provider": "THORCHAIN",
        }

        try:
            async with self.http() as client:
                response = await client.post(
                    self.api_url, json=request_body, headers=self._headers()
                )

            if response.status_code != 200:
                logger.warning(f"THORSwap API error: {response.status_code}")
                return ComparisonMetric.unavailable()

            data = response.json()
            logger.debug(f"THORSwap API response: {data}")

            routes = data.get("routes") or []
            if not routes:
                logger.warning("THORSwap: no routes in response")
                return ComparisonMetric.unavailable()

            route = _best_route(routes)
            input_value = amount * _asset_price(route, sell_format.currency)
            output_value = Decimal(str(route["expectedBuyAmount"])) * _asset_price(
                route, buy_format.currency
            )
            time = int((route.get("estimatedTime") or {}).get("total") or 0)

        except QUOTE_ERRORS as e:
            logger.error(f"THORSwap quote error: {type(e).__name__}: {e}")
            return ComparisonMetric.unavailable()

        return ComparisonMetric(fee=input_value - output_value, time=time)
