"""Pytest configuration and fixtures."""

import asyncio
import copy
import os
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"

from swapwatch.catalog import Asset, NetworkCatalog
from swapwatch.models import NormalizedOutcome, RawSettlement
from swapwatch.routing.base import ComparisonMetric, ProviderAdapter
from swapwatch.routing.mappings import SwapPlatform

BTC_PRICE = 103281.95450855308

WBTC_ETH_SWAP_ADDRESS = "0x795Dcb58d1cd4789169D5F938Ea05E17ecEB68cA"

CATALOG_PAYLOAD = {
    "bitcoin": {
        "name": "Bitcoin",
        "chainId": "bitcoin",
        "assetConfig": [
            {
                "name": "Bitcoin",
                "symbol": "BTC",
                "decimals": 8,
                "tokenAddress": "primary",
                "atomicSwapAddress": "primary",
                "min_amount": "50000",
                "max_amount": "1000000000",
            }
        ],
    },
    "ethereum": {
        "name": "Ethereum",
        "chainId": "evm:1",
        "assetConfig": [
            {
                "name": "Wrapped Bitcoin",
                "symbol": "WBTC",
                "decimals": 8,
                "tokenAddress": "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599",
                "atomicSwapAddress": WBTC_ETH_SWAP_ADDRESS,
            },
            {
                "name": "USD Coin",
                "symbol": "USDC",
                "decimals": 6,
                "tokenAddress": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
                "atomicSwapAddress": "0x5fA58e4E89c85B8d678Ade970bD6afD4311aF17E",
            },
        ],
    },
    "arbitrum": {
        "name": "Arbitrum",
        "chainId": "evm:42161",
        "assetConfig": [
            {
                "name": "Wrapped Bitcoin",
                "symbol": "WBTC",
                "decimals": 8,
                "tokenAddress": "0x2f2a2543B76A4166549F7aaB2e75Bef0aefC5B0f",
                "atomicSwapAddress": "0xb5AE9785349186069C48794a763DB39EC756B1cF",
            }
        ],
    },
}

# Trimmed from a real bitcoin -> ethereum (WBTC) matched order
SETTLEMENT_PAYLOAD = {
    "created_at": "2025-05-19T09:08:09.810539Z",
    "updated_at": "2025-05-19T09:08:09.810539Z",
    "source_swap": {
        "swap_id": "bc1p9nxawu7gly7j8fhgzt92laxrs3d5auv0a9l9esrnexrwjgacy2tq9s4dlr",
        "chain": "bitcoin",
        "asset": "primary",
        "amount": "12000",
        "filled_amount": "12000",
        "initiate_tx_hash": "cc86031ed888ec1c65f7d958733130cf27fc1c85104d0f408eed848759aa3add:897392",
        "redeem_tx_hash": "a201695aa7e2b4abe7454c76199ebb5c25521fb9c2caf9f061e54a06d3031745",
        "refund_tx_hash": "",
    },
    "destination_swap": {
        "swap_id": "359c4306008ba82e4548566c6442d8f0c0cca31a6c159b3f7869a037e6bf02ec",
        "chain": "ethereum",
        "asset": "0x795dcb58d1cd4789169d5f938ea05e17eceb68ca",
        "amount": "11964",
        "filled_amount": "11964",
        "initiate_tx_hash": "0x16a03e451c145b97a8fa6e0761fa6d6f1636e5e7ce64c678f23c87670289ae80",
        "redeem_tx_hash": "0xeeb4232cb643d8c805982ec920a14cb0db39f38928ac462532f1c89a3e7d03ec",
        "refund_tx_hash": "",
    },
    "create_order": {
        "create_id": "bd4d1c864119c7bad2dde31b0b64e4bef77e9a68a1e16433f9c845dc53e7d9af",
        "block_number": "22516017",
        "source_chain": "bitcoin",
        "destination_chain": "ethereum",
        "source_asset": "primary",
        "destination_asset": "0x795dcb58d1cd4789169d5f938ea05e17eceb68ca",
        "source_amount": "12000",
        "destination_amount": "11964",
        "fee": "0.037181503623079111172000",
        "additional_data": {
            "strategy_id": "bnyremac",
            "input_token_price": BTC_PRICE,
            "output_token_price": BTC_PRICE,
            "is_blacklisted": False,
        },
    },
}


class FakeAdapter(ProviderAdapter):
    """Adapter returning a fixed metric, raising, or stalling."""

    def __init__(
        self,
        platform: SwapPlatform,
        fee: float = 0,
        time: int = 0,
        error: Optional[Exception] = None,
        delay: float = 0,
    ):
        super().__init__()
        self._platform = platform
        self.metric = ComparisonMetric(fee=Decimal(str(fee)), time=time)
        self.error = error
        self.delay = delay
        self.calls = []

    @property
    def platform(self) -> SwapPlatform:
        return self._platform

    async def quote(self, src, dst, amount):
        self.calls.append((src, dst, amount))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.metric


@pytest.fixture
def catalog_payload() -> dict:
    return copy.deepcopy(CATALOG_PAYLOAD)


@pytest.fixture
def catalog(catalog_payload) -> NetworkCatalog:
    return NetworkCatalog.from_payload(catalog_payload)


@pytest.fixture
def settlement_payload() -> dict:
    return copy.deepcopy(SETTLEMENT_PAYLOAD)


@pytest.fixture
def settlement(settlement_payload) -> RawSettlement:
    return RawSettlement.model_validate(settlement_payload)


@pytest.fixture
def btc_asset() -> Asset:
    return Asset(
        chain="bitcoin",
        symbol="BTC",
        decimals=8,
        name="Bitcoin",
        token_address="primary",
        atomic_swap_address="primary",
        price_usd=Decimal("100000"),
    )


@pytest.fixture
def wbtc_asset() -> Asset:
    return Asset(
        chain="ethereum",
        symbol="WBTC",
        decimals=8,
        name="Wrapped Bitcoin",
        token_address="0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599",
        atomic_swap_address=WBTC_ETH_SWAP_ADDRESS,
        price_usd=Decimal("100000"),
    )


@pytest.fixture
def make_outcome():
    """Factory for NormalizedOutcome records with a given volume."""

    def _make(order_id: str, volume, fee_saved="5") -> NormalizedOutcome:
        created_at = datetime(2025, 5, 19, 9, 8, 9, tzinfo=timezone.utc)
        return NormalizedOutcome(
            order_id=order_id,
            source_chain="bitcoin",
            destination_chain="ethereum",
            source_asset="primary",
            destination_asset=WBTC_ETH_SWAP_ADDRESS,
            source_amount=Decimal("0.001"),
            destination_amount=Decimal("0.00099"),
            input_token_price=Decimal("100000"),
            output_token_price=Decimal("100000"),
            volume_usd=Decimal(str(volume)),
            garden_fee_usd=Decimal("1"),
            fee_saved_usd=Decimal(str(fee_saved)),
            time_saved_seconds=600,
            time_saved_minutes=10,
            time_saved_display="10m 0s",
            competitor_max_fee_display="$6.00",
            competitor_max_time_display="20m 0s",
            created_at=created_at,
            timestamp=created_at.isoformat(),
            source_swap_amount="100000",
            destination_swap_amount="99000",
        )

    return _make
