"""Static Garden asset -> competitor identifier tables.

Keys are ``(garden chain, symbol)``. Lookups return ``UNSUPPORTED``
rather than ``None`` so adapters branch on a named state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class SwapPlatform(str, Enum):
    """Competitor routing services."""

    CHAINFLIP = "Chainflip"
    THORSWAP = "THORSwap"
    RELAY = "Relay"


@dataclass(frozen=True)
class ProviderAsset:
    """An asset as a provider's API names it.

    ``chain`` is the provider's chain identifier (Relay numeric chain id,
    THORSwap chain prefix, Chainflip chain name) and ``currency`` is the
    token address, pool identifier or ticker respectively.
    """

    chain: str
    currency: str


class _Unsupported:
    def __repr__(self) -> str:
        return "UNSUPPORTED"

    def __bool__(self) -> bool:
        return False


UNSUPPORTED = _Unsupported()

LookupResult = Union[ProviderAsset, _Unsupported]

EVM_NATIVE = "0x0000000000000000000000000000000000000000"
RELAY_BTC_CHAIN_ID = "8253038"
RELAY_BTC_CURRENCY = "bc1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqmql8k8"

RELAY_ASSETS: dict[tuple[str, str], ProviderAsset] = {
    ("bitcoin", "BTC"): ProviderAsset(RELAY_BTC_CHAIN_ID, RELAY_BTC_CURRENCY),
    ("ethereum", "ETH"): ProviderAsset("1", EVM_NATIVE),
    ("ethereum", "WBTC"): ProviderAsset("1", "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599"),
    ("ethereum", "CBBTC"): ProviderAsset("1", "0xcbB7C0000aB88B473b1f5aFd9ef808440eed33Bf"),
    ("ethereum", "USDC"): ProviderAsset("1", "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"),
    ("arbitrum", "ETH"): ProviderAsset("42161", EVM_NATIVE),
    ("arbitrum", "WBTC"): ProviderAsset("42161", "0x2f2a2543B76A4166549F7aaB2e75Bef0aefC5B0f"),
    ("arbitrum", "USDC"): ProviderAsset("42161", "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"),
    ("base", "ETH"): ProviderAsset("8453", EVM_NATIVE),
    ("base", "CBBTC"): ProviderAsset("8453", "0xcbB7C0000aB88B473b1f5aFd9ef808440eed33Bf"),
    ("base", "USDC"): ProviderAsset("8453", "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"),
    ("solana", "SOL"): ProviderAsset("792703809", "11111111111111111111111111111111"),
}

THORSWAP_ASSETS: dict[tuple[str, str], ProviderAsset] = {
    ("bitcoin", "BTC"): ProviderAsset("BTC", "BTC.BTC"),
    ("ethereum", "ETH"): ProviderAsset("ETH", "ETH.ETH"),
    ("ethereum", "WBTC"): ProviderAsset("ETH", "ETH.WBTC-0X2260FAC5E5542A773AA44FBCFEDF7C193BC2C599"),
    ("ethereum", "USDC"): ProviderAsset("ETH", "ETH.USDC-0XA0B86991C6218B36C1D19D4A2E9EB0CE3606EB48"),
    ("arbitrum", "ETH"): ProviderAsset("ARB", "ARB.ETH"),
    ("arbitrum", "WBTC"): ProviderAsset("ARB", "ARB.WBTC-0X2F2A2543B76A4166549F7AAB2E75BEF0AEFC5B0F"),
    ("arbitrum", "USDC"): ProviderAsset("ARB", "ARB.USDC-0XAF88D065E77C8CC2239327C5EDB3A432268E5831"),
    ("base", "ETH"): ProviderAsset("BASE", "BASE.ETH"),
    ("base", "CBBTC"): ProviderAsset("BASE", "BASE.CBBTC-0XCBB7C0000AB88B473B1F5AFD9EF808440EED33BF"),
    ("base", "USDC"): ProviderAsset("BASE", "BASE.USDC-0X833589FCD6EDB6E08F4C7C32D4F71B54BDA02913"),
}

CHAINFLIP_ASSETS: dict[tuple[str, str], ProviderAsset] = {
    ("bitcoin", "BTC"): ProviderAsset("Bitcoin", "BTC"),
    ("ethereum", "ETH"): ProviderAsset("Ethereum", "ETH"),
    ("ethereum", "USDC"): ProviderAsset("Ethereum", "USDC"),
    ("ethereum", "USDT"): ProviderAsset("Ethereum", "USDT"),
    ("arbitrum", "ETH"): ProviderAsset("Arbitrum", "ETH"),
    ("arbitrum", "USDC"): ProviderAsset("Arbitrum", "USDC"),
    ("solana", "SOL"): ProviderAsset("Solana", "SOL"),
    ("solana", "USDC"): ProviderAsset("Solana", "USDC"),
}

_TABLES: dict[SwapPlatform, dict[tuple[str, str], ProviderAsset]] = {
    SwapPlatform.RELAY: RELAY_ASSETS,
    SwapPlatform.THORSWAP: THORSWAP_ASSETS,
    SwapPlatform.CHAINFLIP: CHAINFLIP_ASSETS,
}


def lookup(platform: SwapPlatform, chain: str, symbol: str) -> LookupResult:
    """Map a Garden chain + symbol to the platform's identifiers."""
    return _TABLES[platform].get((chain.lower(), symbol.upper()), UNSUPPORTED)


def is_bitcoin_chain(chain: str) -> bool:
    """Check if a Garden chain identifier is a Bitcoin network."""
    return chain.lower() in ("bitcoin", "bitcoin_testnet", "bitcoin_regtest", "btc")
