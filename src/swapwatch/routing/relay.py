"""Relay cross-chain quote adapter.

API docs: https://docs.relay.link/references/api/get-quote
"""

import logging
from decimal import Decimal
from typing import Optional

import httpx

from swapwatch.catalog import Asset, to_minor_units
from swapwatch.routing.base import (
    DEFAULT_PROVIDER_TIMEOUT,
    QUOTE_ERRORS,
    ComparisonMetric,
    ProviderAdapter,
)
from swapwatch.routing.mappings import RELAY_BTC_CHAIN_ID, SwapPlatform, is_bitcoin_chain

logger = logging.getLogger(__name__)

RELAY_QUOTE_URL = "https://api.relay.link/quote"

# Quotes need a sender/recipient; these never receive funds
EVM_DEAD_ADDRESS = "0x000000000000000000000000000000000000dEaD"
DEFAULT_BTC_ADDRESS = "bc1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh"

# Relay's timeEstimate ignores Bitcoin confirmations
RELAY_BTC_SWAP_TIME = 1200


class RelayAdapter(ProviderAdapter):
    """Relay bridge/swap quotes, valued in USD by Relay itself."""

    def __init__(
        self,
        api_url: str = RELAY_QUOTE_URL,
        btc_address: str = DEFAULT_BTC_ADDRESS,
        timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(timeout=timeout, client=client)
        self.api_url = api_url
        self.btc_address = btc_address

    @property
    def platform(self) -> SwapPlatform:
        return SwapPlatform.RELAY

    def _address_for(self, chain_id: str) -> str:
        return self.btc_address if chain_id == RELAY_BTC_CHAIN_ID else EVM_DEAD_ADDRESS

    async def quote(self, src: Asset, dst: Asset, amount: Decimal) -> ComparisonMetric:
        pair = self.resolve_pair(src, dst)
        if pair is None:
            return ComparisonMetric.unavailable()
        src_format, dst_format = pair

        request_body = {
            "user": self._address_for(src_format.chain),
            "recipient": self._address_for(dst_format.chain),
            "originChainId": int(src_format.chain),
            "destinationChainId": int(dst_format.chain),
            "originCurrency": src_format.currency,
            "destinationCurrency": dst_format.currency,
            "amount": str(to_minor_units(amount, src.decimals)),
            "tradeType": "EXACT_INPUT",
        }

        try:
            async with self.http() as client:
                response = await client.post(self.api_url, json=request_body)

            if response.status_code != 200:
                logger.warning(f"Relay API error: {response.status_code}")
                return ComparisonMetric.unavailable()

            data = response.json()
            logger.debug(f"Relay API response: {data}")

            if not data.get("fees"):
                logger.warning("Relay: no fees found in response")
                return ComparisonMetric.unavailable()

            details = data.get("details") or {}
            amount_in_usd = Decimal(str(details["currencyIn"]["amountUsd"]))
            amount_out_usd = Decimal(str(details["currencyOut"]["amountUsd"]))
            time = int(details.get("timeEstimate") or 0)

        except QUOTE_ERRORS as e:
            logger.error(f"Relay quote error: {type(e).__name__}: {e}")
            return ComparisonMetric.unavailable()

        if is_bitcoin_chain(src.chain) or is_bitcoin_chain(dst.chain):
            time = RELAY_BTC_SWAP_TIME

        return ComparisonMetric(fee=amount_in_usd - amount_out_usd, time=time)
