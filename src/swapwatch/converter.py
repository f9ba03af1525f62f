"""Matched order -> normalized outcome conversion.

Converts minor-unit amounts using the network catalog, computes USD
volume and Garden's own fee, and awaits the competitor comparison
before building the (immutable) outcome.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Iterable, Optional

from swapwatch.catalog import DEFAULT_DECIMALS, Asset, AssetConfig, NetworkCatalog, to_real_quantity
from swapwatch.models import NormalizedOutcome, RawSettlement
from swapwatch.routing.base import ComparisonAggregator

logger = logging.getLogger(__name__)

# Garden's expected settlement time by source chain, in seconds.
# Bitcoin finality dominates; everything else settles in about 30s.
GARDEN_SWAP_TIMES = {
    "bitcoin": 600,
    "bitcoin_testnet": 600,
    "btc": 600,
}
DEFAULT_GARDEN_SWAP_TIME = 30


def garden_swap_time(chain: str) -> int:
    """Get Garden's expected settlement time for a source chain."""
    return GARDEN_SWAP_TIMES.get(chain.lower(), DEFAULT_GARDEN_SWAP_TIME)


class OrderConverter:
    """Turns matched orders into NormalizedOutcome records."""

    def __init__(self, aggregator: ComparisonAggregator):
        self.aggregator = aggregator

    def _destination_asset(
        self, catalog: NetworkCatalog, chain: str, asset_ref: str, price: Decimal
    ) -> Optional[Asset]:
        if chain not in catalog:
            logger.warning(f"Network info not found for chain: {chain}")
            return None

        config = catalog.find_asset(chain, asset_ref)
        if config is None:
            logger.warning(f"No asset config found for {asset_ref} on chain {chain}")
            return None

        return Asset.from_config(config, chain, price)

    def _source_asset(
        self, config: Optional[AssetConfig], chain: str, asset_ref: str, price: Decimal
    ) -> Asset:
        if config is not None:
            return Asset.from_config(config, chain, price)

        return Asset(
            chain=chain,
            symbol=asset_ref,
            decimals=DEFAULT_DECIMALS,
            name=asset_ref,
            token_address=asset_ref,
            atomic_swap_address=asset_ref,
            price_usd=price,
        )

    async def convert(
        self, raw: RawSettlement, catalog: NetworkCatalog
    ) -> Optional[NormalizedOutcome]:
        """
        Convert a matched order into a normalized outcome.

        Args:
            raw: Matched order from the feed
            catalog: Network catalog snapshot for this poll cycle

        Returns:
            NormalizedOutcome, or None if the order is incomplete, the
            destination asset can't be resolved, or conversion fails
        """
        try:
            return await self._convert(raw, catalog)
        except Exception as e:
            logger.error(f"Error converting order {raw.order_id}: {type(e).__name__}: {e}")
            return None

    async def _convert(
        self, raw: RawSettlement, catalog: NetworkCatalog
    ) -> Optional[NormalizedOutcome]:
        order = raw.create_order

        if not raw.is_complete:
            logger.debug(f"Order {raw.order_id} not redeemed on both chains, skipping")
            return None

        source_config = catalog.find_asset(order.source_chain, order.source_asset)
        if source_config is not None:
            source_decimals = source_config.decimals
        else:
            logger.warning(
                f"No asset config found for source {order.source_chain}:{order.source_asset}, "
                f"using raw reference with default of {DEFAULT_DECIMALS} decimals"
            )
            source_decimals = DEFAULT_DECIMALS
        destination_decimals = catalog.resolve_decimals(
            order.destination_chain, order.destination_asset
        )
        source_amount = to_real_quantity(raw.source_swap.amount, source_decimals)
        destination_amount = to_real_quantity(raw.destination_swap.amount, destination_decimals)

        input_price = order.additional_data.input_token_price or Decimal("0")
        output_price = order.additional_data.output_token_price or Decimal("0")

        input_value = source_amount * input_price
        output_value = destination_amount * output_price
        volume = input_value + output_value
        # Amount shrinkage across the swap, valued in USD on each leg
        garden_fee = input_value - output_value

        dst_asset = self._destination_asset(
            catalog, order.destination_chain, order.destination_asset, output_price
        )
        if dst_asset is None:
            return None
        src_asset = self._source_asset(
            source_config, order.source_chain, order.source_asset, input_price
        )

        garden_time = garden_swap_time(order.source_chain)

        comparison = await self.aggregator.compare(
            src_asset, dst_asset, source_amount, garden_fee, garden_time
        )

        return NormalizedOutcome(
            order_id=raw.order_id,
            source_chain=order.source_chain,
            destination_chain=order.destination_chain,
            source_asset=order.source_asset,
            destination_asset=order.destination_asset,
            source_amount=source_amount,
            destination_amount=destination_amount,
            input_token_price=input_price,
            output_token_price=output_price,
            volume_usd=volume,
            garden_fee_usd=garden_fee,
            fee_saved_usd=comparison.fee_saved_usd,
            time_saved_seconds=comparison.time_saved_seconds,
            time_saved_minutes=comparison.time_saved_minutes,
            time_saved_display=comparison.time_saved_display,
            competitor_max_fee_display=comparison.competitor_max_fee_display,
            competitor_max_time_display=comparison.competitor_max_time_display,
            created_at=raw.created_at,
            timestamp=raw.created_at.isoformat(),
            source_swap_amount=raw.source_swap.amount,
            destination_swap_amount=raw.destination_swap.amount,
        )

    async def convert_many(
        self, raws: Iterable[RawSettlement], catalog: NetworkCatalog
    ) -> list[NormalizedOutcome]:
        """Convert a batch concurrently, keeping feed order and dropping failures."""
        results = await asyncio.gather(*(self.convert(raw, catalog) for raw in raws))
        return [outcome for outcome in results if outcome is not None]
