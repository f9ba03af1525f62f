"""Network/asset catalog and decimal resolution.

The catalog is the Garden ``info/assets`` payload: chain identifier ->
network info with its configured assets. It is loaded once per poll
cycle and treated as read-only while a batch of orders is converted.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from typing import Iterator, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

# Used when an asset is missing from the catalog. Lossy on purpose:
# conversions must not block on an incomplete catalog.
DEFAULT_DECIMALS = 8


class AssetConfig(BaseModel):
    """One asset entry of a chain's ``assetConfig`` list."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    symbol: str
    name: str = ""
    decimals: int = Field(..., ge=0)
    token_address: str = Field(default="", alias="tokenAddress")
    atomic_swap_address: str = Field(default="", alias="atomicSwapAddress")
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    chain: str = ""


class NetworkInfo(BaseModel):
    """Catalog entry for a single chain."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""
    chain_id: Optional[Union[int, str]] = Field(default=None, alias="chainId")
    identifier: Optional[str] = None
    assets: list[AssetConfig] = Field(default_factory=list, alias="assetConfig")

    @model_validator(mode="after")
    def _check_unique_swap_addresses(self) -> "NetworkInfo":
        seen: set[str] = set()
        for asset in self.assets:
            address = asset.atomic_swap_address.lower()
            if not address:
                continue
            if address in seen:
                raise ValueError(
                    f"duplicate atomicSwapAddress {asset.atomic_swap_address} on {self.name or 'network'}"
                )
            seen.add(address)
        return self


@dataclass(frozen=True)
class Asset:
    """Canonical asset descriptor handed to the competitor adapters.

    ``price_usd`` is the settlement-time token price, attached so that
    adapters whose APIs only quote amounts can value them in USD.
    """

    chain: str
    symbol: str
    decimals: int
    name: str = ""
    token_address: str = ""
    atomic_swap_address: str = ""
    price_usd: Decimal = Decimal("0")

    @classmethod
    def from_config(cls, config: AssetConfig, chain: str, price_usd: Decimal) -> "Asset":
        """Build a descriptor from a catalog entry."""
        return cls(
            chain=chain,
            symbol=config.symbol,
            decimals=config.decimals,
            name=config.name or config.symbol,
            token_address=config.token_address,
            atomic_swap_address=config.atomic_swap_address,
            price_usd=price_usd,
        )


class NetworkCatalog:
    """Read-only view over the per-chain asset registry."""

    def __init__(self, networks: Optional[dict[str, NetworkInfo]] = None):
        self._networks: dict[str, NetworkInfo] = dict(networks or {})
        for chain, info in self._networks.items():
            for asset in info.assets:
                if not asset.chain:
                    asset.chain = chain

    @classmethod
    def from_payload(cls, payload: dict) -> "NetworkCatalog":
        """Validate a raw ``chain -> network`` mapping.

        Invalid assets are skipped, and so is a chain that fails
        validation as a whole (e.g. duplicate swap addresses). Lookups
        for anything skipped fall back to the default decimals.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"catalog payload must be an object, got {type(payload).__name__}")

        networks = {}
        for chain, info in payload.items():
            if not isinstance(info, dict):
                logger.warning(f"Skipping network {chain}: expected an object")
                continue

            assets = []
            for item in info.get("assetConfig") or []:
                try:
                    assets.append(AssetConfig.model_validate(item))
                except ValidationError as e:
                    symbol = item.get("symbol") if isinstance(item, dict) else None
                    logger.warning(f"Skipping malformed asset {symbol} on {chain}: {e.error_count()} errors")

            try:
                networks[chain] = NetworkInfo.model_validate({**info, "assetConfig": assets})
            except ValidationError as e:
                logger.warning(f"Skipping network {chain}: {e}")

        return cls(networks)

    def __contains__(self, chain: str) -> bool:
        return chain in self._networks

    def __iter__(self) -> Iterator[str]:
        return iter(self._networks)

    def __len__(self) -> int:
        return len(self._networks)

    def get(self, chain: str) -> Optional[NetworkInfo]:
        """Get the network entry for a chain."""
        return self._networks.get(chain)

    def find_asset(self, chain: str, asset_ref: str) -> Optional[AssetConfig]:
        """Find an asset by atomic swap address, then by symbol or token address.

        All comparisons are case-insensitive.
        """
        network = self._networks.get(chain)
        if network is None or not asset_ref:
            return None

        ref = asset_ref.lower()
        for asset in network.assets:
            if asset.atomic_swap_address and asset.atomic_swap_address.lower() == ref:
                return asset

        for asset in network.assets:
            if asset.symbol.lower() == ref:
                return asset
            if asset.token_address and asset.token_address.lower() == ref:
                return asset

        return None

    def resolve_decimals(self, chain: str, asset_ref: str) -> int:
        """Get decimal precision for an asset, falling back to 8 on a miss."""
        asset = self.find_asset(chain, asset_ref)
        if asset is None:
            logger.warning(
                f"Could not find decimals for {chain}:{asset_ref}, using default of {DEFAULT_DECIMALS}"
            )
            return DEFAULT_DECIMALS
        return asset.decimals


def to_real_quantity(amount: Union[str, int], decimals: int) -> Decimal:
    """Convert a minor-unit integer amount to a real token quantity."""
    return Decimal(int(amount)).scaleb(-decimals)


def to_minor_units(quantity: Union[Decimal, str, int], decimals: int) -> int:
    """Convert a real token quantity back to minor units (truncating)."""
    scaled = Decimal(quantity).scaleb(decimals)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))
